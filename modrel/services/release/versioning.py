"""Version-aware ordering of version labels.

Labels are compared the way ``sort -V`` orders them: digit runs compare
numerically, the text between them compares character by character with
letters before other characters and ``~`` before everything, including the
end of the label. So ``v1.10`` sorts after ``v1.2`` and ``v1.0~rc1`` sorts
before ``v1.0``.
"""

from __future__ import annotations

import re

_DIGITS_RE = re.compile(r"(\d+)")

# Appended to each text run so a shorter run sorts before a longer one,
# except when the longer one continues with "~".
_END = 0


def _char_order(c: str) -> int:
    if c == "~":
        return -1
    if c.isalpha():
        return ord(c)
    return ord(c) + 0x110000


def _text_key(text: str) -> tuple[int, ...]:
    return (*(_char_order(c) for c in text), _END)


def version_key(label: str) -> tuple[tuple[tuple[int, ...] | int, ...], str]:
    """Sort key for a version label.

    ``re.split`` with a capture group alternates text and digit runs, always
    starting (and ending) with a text run, so keys align position by position.
    Equal keys fall back to plain string order.
    """
    parts = _DIGITS_RE.split(label)
    key: list[tuple[int, ...] | int] = []
    for i, part in enumerate(parts):
        if i % 2:
            key.append(int(part))
        else:
            key.append(_text_key(part))
    return (tuple(key), label)


def version_aware_max(*labels: str) -> str:
    """The highest of ``labels`` under version-aware ordering."""
    if not labels:
        raise ValueError("version_aware_max needs at least one label")
    return max(labels, key=version_key)

