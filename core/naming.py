# =============================================================================
# core/naming.py  —  Corpus Identifier Canonicalization
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns any free-form corpus identifier into a string shaped like a Vertex
#   AI RAG corpus resource name:
#
#       projects/<project>/locations/<location>/ragCorpora/<id>
#
#   This is a best-effort GUESS, not an existence proof.  The resolver uses
#   it only for exact comparison against live listing entries.
# =============================================================================

import re

from core.config import RagSettings

_RESOURCE_NAME_RE = re.compile(r"^projects/[^/]+/locations/[^/]+/ragCorpora/[^/]+$")
_DISALLOWED_CHARS_RE = re.compile(r"[^a-zA-Z0-9_-]")


def is_resource_name(identifier: str) -> bool:
    """True when `identifier` is already a full corpus resource name."""
    return bool(_RESOURCE_NAME_RE.match(identifier))


def sanitize(value: str) -> str:
    """Replace every character outside [a-zA-Z0-9_-] with an underscore."""
    return _DISALLOWED_CHARS_RE.sub("_", value)


def canonicalize(identifier: str, settings: RagSettings) -> str:
    """Convert a corpus identifier to its full resource name.

    Args:
        identifier: Resource name, display name, bare id or partial path.
        settings: Supplies the project and location to splice in.

    Returns:
        `identifier` unchanged if it is already a resource name, otherwise
        its sanitized trailing `/` segment placed under settings.parent.
        When the trailing segment is empty ("abc/") the whole identifier is
        sanitized instead; an empty identifier maps to "_".
    """
    if is_resource_name(identifier):
        return identifier

    trailing = identifier.rsplit("/", 1)[-1] or identifier
    corpus_id = sanitize(trailing) or "_"
    return f"{settings.parent}/ragCorpora/{corpus_id}"
