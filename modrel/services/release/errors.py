from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "downgrade",
    "publish_collision",
    "publish_failed",
    "gh_missing",
    "invalid_metadata",
    "invalid_feed",
    "invalid_identity",
    "io_failed",
    "git_failed",
    "build_failed",
    "package_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error payload.

    Every failure of a release run is terminal for that run; nothing is
    retried, the next invocation starts from scratch.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
