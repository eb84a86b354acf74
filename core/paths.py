# =============================================================================
# core/paths.py  —  Data-Source Path Validation for add_data
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sorts the paths an LLM passes to add_data into importable sources and
#   rejects.  Supported:
#
#     https://docs.google.com/{document,spreadsheets,presentation}/d/<id>/...
#         → converted to https://drive.google.com/file/d/<id>/view
#     https://drive.google.com/file/d/<id>/...  or  .../open?id=<id>
#     gs://bucket/path
#
#   Everything else lands in `invalid` with a short reason.
# =============================================================================

import re
from typing import Iterable

from core.models import ParsedPaths

_DOCS_RE = re.compile(
    r"https://docs\.google\.com/(?:document|spreadsheets|presentation)/d/([a-zA-Z0-9_-]+)(?:/|$)"
)
_DRIVE_RE = re.compile(
    r"https://drive\.google\.com/(?:file/d/|open\?id=)([a-zA-Z0-9_-]+)(?:/|$)"
)


def drive_file_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view"


def parse_paths(paths: Iterable[str]) -> ParsedPaths:
    """Validate data-source paths.

    Args:
        paths: Raw strings from the caller.

    Returns:
        A ParsedPaths with validated URLs, Drive file ids, GCS URIs, the
        Docs→Drive conversions that were applied, and rejected inputs.
    """
    parsed = ParsedPaths()

    for path in paths or []:
        if not path or not path.strip():
            parsed.invalid.append(f"{path} (Not a valid or empty string)")
            continue

        docs_match = _DOCS_RE.search(path)
        if docs_match:
            file_id = docs_match.group(1)
            url = drive_file_url(file_id)
            parsed.validated.append(url)
            parsed.drive_file_ids.append(file_id)
            parsed.conversions.append(f"{path} → {url}")
            continue

        drive_match = _DRIVE_RE.search(path)
        if drive_match:
            file_id = drive_match.group(1)
            url = drive_file_url(file_id)
            parsed.validated.append(url)
            parsed.drive_file_ids.append(file_id)
            if url != path:
                parsed.conversions.append(f"{path} → {url}")
            continue

        if path.startswith("gs://"):
            parsed.validated.append(path)
            parsed.gcs_paths.append(path)
            continue

        parsed.invalid.append(f"{path} (Invalid format)")

    return parsed
