# =============================================================================
# core/config.py  —  Runtime Settings for the RAG Corpus Agent
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Collects every tunable value the corpus tools need (Google Cloud project,
#   region, model, retrieval and chunking defaults) into ONE explicit object.
#
# HOW SETTINGS FLOW:
#   main.py / tools/mcp_server.py call load_dotenv() first, then
#   RagSettings.from_env() reads the process environment.  The resulting
#   object is handed to the canonicalizer, the resolver and the registry
#   gateway at construction time.  Nothing in core/ reads os.environ on its
#   own after that point.
#
# ENVIRONMENT VARIABLES:
#   GOOGLE_CLOUD_PROJECT            → project_id   (required)
#   GOOGLE_CLOUD_LOCATION           → location     (required, e.g. us-central1)
#   RAG_AGENT_MODEL                 → model        (default gemini-2.0-flash-001)
#   RAG_TOP_K                       → top_k        (default 3)
#   RAG_CHUNK_SIZE                  → chunk_size   (default 512)
#   RAG_CHUNK_OVERLAP               → chunk_overlap (default 100)
#   RAG_EMBEDDING_REQUESTS_PER_MIN  → embedding_requests_per_min (default 1000)
#   RAG_TOOL_TRANSPORT              → tool_transport ("function" or "mcp")
# =============================================================================

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_MODEL = "gemini-2.0-flash-001"
DEFAULT_CHUNK_SIZE = 512
DEFAULT_CHUNK_OVERLAP = 100
DEFAULT_TOP_K = 3
DEFAULT_EMBEDDING_REQUESTS_PER_MIN = 1000

TOOL_TRANSPORTS = ("function", "mcp")

NOT_CONFIGURED_MESSAGE = (
    "PROJECT_ID or LOCATION are not set. Please set environment variables."
)


@dataclass(frozen=True)
class RagSettings:
    """Project/location identity plus RAG defaults."""

    project_id: Optional[str]
    location: Optional[str]
    model: str = DEFAULT_MODEL
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_overlap: int = DEFAULT_CHUNK_OVERLAP
    top_k: int = DEFAULT_TOP_K
    embedding_requests_per_min: int = DEFAULT_EMBEDDING_REQUESTS_PER_MIN
    tool_transport: str = "function"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RagSettings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from.  Defaults to os.environ.

        Returns:
            A RagSettings instance.  Missing project/location are kept as
            None so tools can report a friendly error instead of crashing.
        """
        env = os.environ if environ is None else environ
        transport = (env.get("RAG_TOOL_TRANSPORT") or "function").strip().lower()
        if transport not in TOOL_TRANSPORTS:
            raise ValueError(
                f"RAG_TOOL_TRANSPORT must be one of {TOOL_TRANSPORTS}, got {transport!r}"
            )
        return cls(
            project_id=env.get("GOOGLE_CLOUD_PROJECT") or None,
            location=env.get("GOOGLE_CLOUD_LOCATION") or None,
            model=env.get("RAG_AGENT_MODEL") or DEFAULT_MODEL,
            chunk_size=_int_env(env, "RAG_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            chunk_overlap=_int_env(env, "RAG_CHUNK_OVERLAP", DEFAULT_CHUNK_OVERLAP),
            top_k=_int_env(env, "RAG_TOP_K", DEFAULT_TOP_K),
            embedding_requests_per_min=_int_env(
                env,
                "RAG_EMBEDDING_REQUESTS_PER_MIN",
                DEFAULT_EMBEDDING_REQUESTS_PER_MIN,
            ),
            tool_transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.project_id and self.location)

    @property
    def parent(self) -> str:
        """The `projects/<p>/locations/<l>` parent every corpus lives under."""
        return f"projects/{self.project_id}/locations/{self.location}"

    @property
    def api_endpoint(self) -> str:
        """Regional Vertex AI endpoint, e.g. us-central1-aiplatform.googleapis.com."""
        return f"{self.location}-aiplatform.googleapis.com"


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
