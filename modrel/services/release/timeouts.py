from __future__ import annotations

# Release creation including the asset upload
GH_UPLOAD_TIMEOUT_SECONDS = 15 * 60.0
