# =============================================================================
# core/resolution.py  —  Corpus Resolution Orchestrator
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Answers the question every corpus tool starts with: "which corpus did the
#   caller mean?"  It composes the other core pieces:
#
#       identifier (explicit, or the session's current corpus)
#           │
#           ▼
#       canonicalize()        core/naming.py
#           │
#           ▼
#       live registry listing core/registry.py
#           │
#           ▼
#       exact match, else ranked substring match   core/matching.py
#           │
#           ▼
#       SessionCache.record_existence()            core/session_cache.py
#
# CACHE RULES:
#   - The listing itself is never cached: a corpus created or deleted
#     earlier in the session must be visible right away.
#   - A cached positive only short-circuits check_corpus_exists().
#     resolve_target() always goes to the registry for the real handle.
#   - Nothing is written to the session on a failure path.
# =============================================================================

import logging
from typing import Optional

from core.config import RagSettings
from core.matching import find_best_match, find_exact_match
from core.models import CorpusHandle, Resolution, ResolutionStatus
from core.naming import canonicalize
from core.registry import CorpusRegistry, RegistryUnavailable
from core.session_cache import SessionCache, SessionState

logger = logging.getLogger(__name__)


class CorpusResolver:
    """Resolves caller-supplied corpus identifiers against the registry."""

    def __init__(self, settings: RagSettings, registry: CorpusRegistry):
        self.settings = settings
        self.registry = registry

    def select_identifier(
        self,
        explicit_identifier: Optional[str],
        state: SessionState,
    ) -> Optional[str]:
        """Pick the identifier to act on: explicit if non-blank, else the
        session's current corpus, else None."""
        explicit = (explicit_identifier or "").strip()
        if explicit:
            return explicit
        current = (SessionCache(state).current_corpus or "").strip()
        return current or None

    async def resolve_target(
        self,
        explicit_identifier: Optional[str],
        state: SessionState,
        exact_only: bool = False,
    ) -> Resolution:
        """Turn an identifier into a canonical CorpusHandle.

        Args:
            explicit_identifier: What the caller passed.  Blank means "use
                the current corpus".
            state: The session state to read the default from and record
                existence into.
            exact_only: Skip the fuzzy pass.  Mutating operations use this
                so a partial name never selects a corpus it only contains.

        Returns:
            A Resolution.  Only RESOLVED carries a handle.
        """
        identifier = self.select_identifier(explicit_identifier, state)
        if identifier is None:
            return Resolution(status=ResolutionStatus.NO_TARGET)

        canonical = canonicalize(identifier, self.settings)
        logger.debug("Resolving %r (canonical guess: %s)", identifier, canonical)

        try:
            records = await self.registry.list_corpora()
        except RegistryUnavailable as exc:
            logger.error("Registry unavailable while resolving %r: %s", identifier, exc)
            return Resolution(
                status=ResolutionStatus.REGISTRY_UNAVAILABLE,
                identifier=identifier,
                error=str(exc),
            )

        handle: Optional[CorpusHandle] = find_exact_match(identifier, canonical, records)
        if handle is None and not exact_only:
            handle = find_best_match(identifier, records)
        if handle is None:
            logger.info("No corpus matches %r", identifier)
            return Resolution(status=ResolutionStatus.NOT_FOUND, identifier=identifier)

        SessionCache(state).record_existence(identifier)
        logger.info("Resolved %r -> %s", identifier, handle.resource_name)
        return Resolution(
            status=ResolutionStatus.RESOLVED,
            identifier=identifier,
            handle=handle,
        )

    async def check_corpus_exists(self, identifier: str, state: SessionState) -> bool:
        """Existence guard used before create/delete/add/describe.

        Cache hit returns True with no registry call.  Otherwise the live
        listing is searched for an exact resource-name or display-name hit.

        Raises:
            RegistryUnavailable: the listing failed.  An outage is not
                reported as non-existence.
        """
        identifier = (identifier or "").strip()
        if not identifier:
            return False

        cache = SessionCache(state)
        if cache.has_confirmed_existence(identifier):
            logger.debug("Existence of %r found in session cache", identifier)
            return True

        canonical = canonicalize(identifier, self.settings)
        records = await self.registry.list_corpora()
        if find_exact_match(identifier, canonical, records) is None:
            logger.info("Corpus %r not found", identifier)
            return False

        cache.record_existence(identifier)
        logger.info("Corpus %r exists", identifier)
        return True
