# =============================================================================
# core/session_cache.py  —  Per-Session Corpus Memory
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps a conversation's session state (ADK's tool_context.state, an MCP
#   session's dict, or a plain dict in tests) and owns two key families:
#
#     current_corpus             → the implicit target for calls that omit one
#     corpus_exists_<identifier> → True once existence was confirmed
#
#   The cache never talks to the network and never normalizes identifiers:
#   "Notes" and "notes" are cached independently.
#
# ATOMICITY:
#   Every method is synchronous.  Under asyncio, a read-modify-write here
#   cannot interleave with another coroutine of the same session.
# =============================================================================

import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

CURRENT_CORPUS_KEY = "current_corpus"
EXISTS_KEY_PREFIX = "corpus_exists_"


class SessionState(Protocol):
    """The subset of a mapping the cache needs.

    google.adk.sessions.State and dict both satisfy it.
    """

    def get(self, key: str, default: Any = None) -> Any: ...

    def __setitem__(self, key: str, value: Any) -> None: ...


def exists_key(identifier: str) -> str:
    return f"{EXISTS_KEY_PREFIX}{identifier}"


class SessionCache:
    """Read/write/invalidate operations over one session's state."""

    def __init__(self, state: SessionState):
        self.state = state

    @property
    def current_corpus(self) -> Optional[str]:
        return self.state.get(CURRENT_CORPUS_KEY) or None

    def has_confirmed_existence(self, identifier: str) -> bool:
        return bool(self.state.get(exists_key(identifier)))

    def record_existence(self, identifier: str) -> None:
        """Mark `identifier` as an existing corpus.

        Postcondition: if the session had no current corpus, `identifier`
        becomes the current corpus.
        """
        self.state[exists_key(identifier)] = True
        if not self.current_corpus:
            self.state[CURRENT_CORPUS_KEY] = identifier
            logger.info("Current corpus defaulted to %r", identifier)

    def set_current(self, identifier: str) -> None:
        self.state[CURRENT_CORPUS_KEY] = identifier

    def invalidate(self, identifier: str) -> None:
        """Flip a confirmed-existence flag back to False.

        current_corpus is left as-is; a later call that relies on it will
        fail at the registry listing instead.
        """
        key = exists_key(identifier)
        if self.state.get(key):
            self.state[key] = False
            logger.info("Invalidated existence cache for %r", identifier)
