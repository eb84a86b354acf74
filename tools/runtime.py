# =============================================================================
# tools/runtime.py  —  Shared CorpusService for the Tool Layer
# =============================================================================
# Both tool front-ends (ADK function tools and the MCP server) use ONE
# CorpusService per process.  It is built lazily from the environment the
# first time a tool runs, so importing the tools never touches the network.
#
# Tests call set_service() with a service wired to in-memory fakes.
# =============================================================================

from typing import Optional

from core.config import RagSettings
from core.corpus_service import CorpusService

_service: Optional[CorpusService] = None


def get_service() -> CorpusService:
    global _service
    if _service is None:
        _service = CorpusService.from_settings(RagSettings.from_env())
    return _service


def set_service(service: Optional[CorpusService]) -> None:
    """Replace (or with None, reset) the process-wide service."""
    global _service
    _service = service
