# =============================================================================
# core/models.py  —  Data Models for the RAG Corpus Agent
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Defines the shapes of data that flow between the registry gateway, the
#   resolver, the session cache and the tools.
#
# THE THREE CORPUS SHAPES:
#   - CorpusRecord : one row of a live registry listing (transient)
#   - CorpusHandle : the canonical answer to "which corpus did you mean?"
#   - Resolution   : the full outcome of a resolution attempt, including
#                    the non-success cases (no target, not found, outage)
#
#   Tools only ever talk to the registry with a CorpusHandle's resource
#   name.  Raw identifiers from the LLM are never sent to the registry as-is.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


# -----------------------------------------------------------------------------
# CorpusRecord — one entry of a registry listing
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CorpusRecord:
    """A corpus as reported by the registry listing."""

    resource_name: str                 # projects/<p>/locations/<l>/ragCorpora/<id>
    display_name: str = ""             # Human-readable name, may be empty
    create_time: str = ""              # ISO-8601, "" when unknown
    update_time: str = ""

    @property
    def corpus_id(self) -> str:
        """Trailing segment of the resource name."""
        return self.resource_name.rsplit("/", 1)[-1]


# -----------------------------------------------------------------------------
# CorpusHandle — canonical identity of a corpus
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CorpusHandle:
    """Canonical resource name plus optional display name."""

    resource_name: str
    display_name: Optional[str] = None

    @property
    def label(self) -> str:
        """The name shown to users: display name, else resource name."""
        return self.display_name or self.resource_name

    @classmethod
    def from_record(cls, record: CorpusRecord) -> "CorpusHandle":
        return cls(
            resource_name=record.resource_name,
            display_name=record.display_name or None,
        )


@dataclass(frozen=True)
class RagFileRecord:
    """A single document attached to a corpus."""

    file_id: str
    display_name: str = ""
    create_time: str = ""
    update_time: str = ""


@dataclass(frozen=True)
class RetrievedContext:
    """One retrieved chunk returned by a RAG query."""

    source_uri: str
    source_name: str
    text: str
    score: float = 0.0


# -----------------------------------------------------------------------------
# Resolution — outcome of "give me the corpus the caller meant"
# -----------------------------------------------------------------------------
class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    NO_TARGET = "no_target"                       # nothing supplied, no default
    NOT_FOUND = "not_found"                       # supplied, matched nothing
    REGISTRY_UNAVAILABLE = "registry_unavailable"  # listing failed


@dataclass(frozen=True)
class Resolution:
    """Result of resolve_target().

    `identifier` is the literal string that was looked up (the explicit one,
    or the session's current corpus).  `handle` is set only when RESOLVED.
    """

    status: ResolutionStatus
    identifier: Optional[str] = None
    handle: Optional[CorpusHandle] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is ResolutionStatus.RESOLVED


# -----------------------------------------------------------------------------
# ParsedPaths — output of path validation for add_data
# -----------------------------------------------------------------------------
@dataclass
class ParsedPaths:
    """Validated and rejected data-source paths."""

    validated: list[str] = field(default_factory=list)
    invalid: list[str] = field(default_factory=list)
    conversions: list[str] = field(default_factory=list)
    gcs_paths: list[str] = field(default_factory=list)
    drive_file_ids: list[str] = field(default_factory=list)
