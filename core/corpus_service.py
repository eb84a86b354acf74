# =============================================================================
# core/corpus_service.py  —  The Seven Corpus Operations
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Implements every operation the agent can perform on RAG corpora:
#
#     rag_query         list_corpora      create_corpus     add_data
#     get_corpus_info   delete_corpus     delete_document
#
#   Each method takes plain arguments plus the caller's session state and
#   returns a response dict (core/responses.py).  No method raises for an
#   expected failure: missing config, unknown corpus, registry outage and
#   failed mutations all come back as {"status": "error", ...}.
#
# FRAMEWORK-AGNOSTIC:
#   The ADK function tools (tools/adk_tools.py) pass tool_context.state;
#   the MCP server (tools/mcp_server.py) passes a per-connection dict.
#   Both call the same methods here.
#
# THE SHARED FLOW FOR CORPUS-TARGETED OPERATIONS:
#   1. pick identifier   (explicit, else session current_corpus)
#   2. existence guard   (cache, else exact match on the live listing)
#   3. resolve_target    (live listing → canonical handle)
#   4. registry call     (using the handle's resource name only)
#   5. session update    (current corpus / invalidation)
# =============================================================================

import logging
from dataclasses import asdict
from typing import Any, Optional, Sequence

from core.config import NOT_CONFIGURED_MESSAGE, RagSettings
from core.models import Resolution, ResolutionStatus
from core.naming import sanitize
from core.paths import parse_paths
from core.registry import (
    ContextRetriever,
    CorpusRegistry,
    RegistryError,
    RegistryUnavailable,
    VertexRagRegistry,
    VertexRagRetriever,
)
from core.resolution import CorpusResolver
from core.responses import build_error, build_response, build_success
from core.session_cache import SessionCache, SessionState

logger = logging.getLogger(__name__)

NO_TARGET_MESSAGE = (
    "No corpus specified. Provide a corpus_name or set the current_corpus "
    "in the tool context."
)


class CorpusService:
    """Corpus operations over a registry, a retriever and session state."""

    def __init__(
        self,
        settings: RagSettings,
        registry: CorpusRegistry,
        retriever: ContextRetriever,
    ):
        self.settings = settings
        self.registry = registry
        self.retriever = retriever
        self.resolver = CorpusResolver(settings, registry)

    @classmethod
    def from_settings(cls, settings: RagSettings) -> "CorpusService":
        """Wire the service to Vertex AI RAG Engine."""
        return cls(
            settings=settings,
            registry=VertexRagRegistry(settings),
            retriever=VertexRagRetriever(settings),
        )

    # -------------------------------------------------------------------------
    # rag_query
    # -------------------------------------------------------------------------
    async def rag_query(
        self,
        corpus_name: Optional[str],
        query: Optional[str],
        state: SessionState,
    ) -> dict[str, Any]:
        trimmed_query = (query or "").strip()
        if not trimmed_query:
            return build_error(
                "A non-empty query is required.",
                {"query": query, "corpus_name": corpus_name},
            )
        if not self.settings.is_configured:
            return build_error(
                NOT_CONFIGURED_MESSAGE,
                {"query": trimmed_query, "corpus_name": corpus_name},
            )

        resolution = await self.resolver.resolve_target(corpus_name, state)
        if not resolution.ok:
            return self._resolution_error(
                resolution,
                {"query": trimmed_query, "corpus_name": resolution.identifier or corpus_name},
                not_found_hint=(
                    "Please create it using the create_corpus tool or list "
                    "available corpora."
                ),
            )

        handle = resolution.handle
        label = handle.label
        try:
            contexts = await self.retriever.retrieve_contexts(
                handle.resource_name, trimmed_query, self.settings.top_k
            )
        except RegistryError as exc:
            logger.error("Error retrieving contexts from %s: %s", handle.resource_name, exc)
            return build_error(
                f"Error querying corpus: {exc}",
                {"query": trimmed_query, "corpus_name": label},
            )

        if not contexts:
            return build_response(
                "warning",
                f"No results found in corpus '{label}' for query: '{trimmed_query}'",
                {
                    "query": trimmed_query,
                    "corpus_name": label,
                    "results": [],
                    "results_count": 0,
                },
            )

        SessionCache(state).set_current(label)
        results = [asdict(context) for context in contexts]
        return build_success(
            f"Successfully queried corpus '{label}'",
            {
                "query": trimmed_query,
                "corpus_name": label,
                "results": results,
                "results_count": len(results),
            },
        )

    # -------------------------------------------------------------------------
    # list_corpora
    # -------------------------------------------------------------------------
    async def list_corpora(self) -> dict[str, Any]:
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, {"corpora": []})

        try:
            records = await self.registry.list_corpora()
        except RegistryError as exc:
            return build_error(str(exc), {"corpora": []})

        corpora = [
            {
                "resource_name": record.resource_name,
                "display_name": record.display_name,
                "create_time": record.create_time,
                "update_time": record.update_time,
            }
            for record in records
        ]
        return build_success(
            f"Found {len(corpora)} available corpora",
            {"corpora": corpora},
        )

    # -------------------------------------------------------------------------
    # create_corpus
    # -------------------------------------------------------------------------
    async def create_corpus(
        self,
        corpus_name: Optional[str],
        state: SessionState,
    ) -> dict[str, Any]:
        name = (corpus_name or "").strip()
        extra = {"corpus_name": corpus_name, "corpus_created": False}
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, extra)
        if not name:
            return build_error("A corpus name is required.", extra)

        try:
            if await self.resolver.check_corpus_exists(name, state):
                logger.info("Corpus %r already exists", name)
                return build_response("info", f"Corpus '{name}' already exists", extra)
        except RegistryUnavailable as exc:
            return build_error(f"Could not check whether corpus exists: {exc}", extra)

        display_name = sanitize(name)
        logger.info("Creating corpus %r (display name %r)", name, display_name)
        try:
            record = await self.registry.create_corpus(display_name)
        except RegistryError as exc:
            logger.error("Error creating corpus %r: %s", name, exc)
            return build_error(f"Error creating corpus: {exc}", extra)

        # The registry stores the sanitized display name; that is the string
        # later resolutions can match, so it becomes the current corpus.
        created_name = record.display_name or display_name
        cache = SessionCache(state)
        cache.record_existence(name)
        cache.record_existence(created_name)
        cache.set_current(created_name)

        return build_success(
            f"Successfully created corpus '{name}'",
            {
                "corpus_name": record.resource_name or name,
                "display_name": record.display_name or display_name,
                "corpus_created": True,
            },
        )

    # -------------------------------------------------------------------------
    # add_data
    # -------------------------------------------------------------------------
    async def add_data(
        self,
        corpus_name: Optional[str],
        paths: Optional[Sequence[str]],
        state: SessionState,
    ) -> dict[str, Any]:
        paths = list(paths or [])
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, {"corpus_name": corpus_name, "paths": paths})

        parsed = parse_paths(paths)
        if not parsed.validated:
            return build_error(
                "No valid paths provided. Please provide Google Drive URLs or GCS paths.",
                {"corpus_name": corpus_name, "invalid_paths": parsed.invalid},
            )

        resolution, failure = await self._guarded_resolve(
            corpus_name,
            state,
            {"corpus_name": corpus_name, "paths": paths},
            missing_hint="Please create it first using the create_corpus tool.",
        )
        if failure is not None:
            return failure

        identifier = resolution.identifier
        try:
            total_added = await self.registry.import_files(
                resolution.handle.resource_name,
                drive_file_ids=parsed.drive_file_ids,
                gcs_uris=parsed.gcs_paths,
            )
        except RegistryError as exc:
            return build_error(
                f"Error adding data to corpus: {exc}",
                {"corpus_name": identifier, "paths": paths},
            )

        cache = SessionCache(state)
        if not cache.current_corpus:
            cache.set_current(identifier)

        files_added = total_added or len(parsed.validated)
        conversion_note = (
            " (Converted Google Docs URLs to Drive format)" if parsed.conversions else ""
        )
        handle = resolution.handle
        return build_success(
            f"Successfully added {files_added} file(s) to corpus '{handle.label}'{conversion_note}",
            {
                "corpus_name": handle.resource_name,
                "corpus_display_name": handle.display_name,
                "files_added": files_added,
                "paths": parsed.validated,
                "invalid_paths": parsed.invalid or None,
                "conversions": parsed.conversions or None,
            },
        )

    # -------------------------------------------------------------------------
    # get_corpus_info
    # -------------------------------------------------------------------------
    async def get_corpus_info(
        self,
        corpus_name: Optional[str],
        state: SessionState,
    ) -> dict[str, Any]:
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, {"corpus_name": corpus_name})

        resolution, failure = await self._guarded_resolve(
            corpus_name, state, {"corpus_name": corpus_name}
        )
        if failure is not None:
            return failure

        handle = resolution.handle
        try:
            record = await self.registry.get_corpus(handle.resource_name)
        except RegistryError as exc:
            return build_error(
                f"Error getting corpus information: {exc}",
                {"corpus_name": resolution.identifier},
            )
        display_name = record.display_name or handle.label

        try:
            files = await self.registry.list_files(handle.resource_name)
        except RegistryError as exc:
            logger.warning("Could not list files of %s: %s", handle.resource_name, exc)
            files = []

        return build_success(
            f"Successfully retrieved information for corpus '{display_name}'",
            {
                "corpus_name": handle.resource_name,
                "corpus_display_name": display_name,
                "create_time": record.create_time or None,
                "update_time": record.update_time or None,
                "file_count": len(files),
                "files": [asdict(rag_file) for rag_file in files],
            },
        )

    # -------------------------------------------------------------------------
    # delete_corpus
    # -------------------------------------------------------------------------
    async def delete_corpus(
        self,
        corpus_name: Optional[str],
        state: SessionState,
    ) -> dict[str, Any]:
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, {"corpus_name": corpus_name})

        resolution, failure = await self._guarded_resolve(
            corpus_name, state, {"corpus_name": corpus_name}
        )
        if failure is not None:
            return failure

        identifier = resolution.identifier
        handle = resolution.handle
        try:
            await self.registry.delete_corpus(handle.resource_name)
        except RegistryError as exc:
            return build_error(f"Error deleting corpus: {exc}", {"corpus_name": identifier})

        cache = SessionCache(state)
        for name in {identifier, handle.resource_name, handle.display_name}:
            if name:
                cache.invalidate(name)

        return build_success(
            f"Successfully deleted corpus '{handle.label}'",
            {
                "corpus_name": handle.resource_name,
                "corpus_display_name": handle.display_name,
            },
        )

    # -------------------------------------------------------------------------
    # delete_document
    # -------------------------------------------------------------------------
    async def delete_document(
        self,
        corpus_name: Optional[str],
        document_id: Optional[str],
        state: SessionState,
    ) -> dict[str, Any]:
        extra = {"corpus_name": corpus_name, "document_id": document_id}
        if not self.settings.is_configured:
            return build_error(NOT_CONFIGURED_MESSAGE, extra)
        document_id = (document_id or "").strip()
        if not document_id:
            return build_error("A document_id is required.", extra)

        resolution, failure = await self._guarded_resolve(corpus_name, state, extra)
        if failure is not None:
            return failure

        identifier = resolution.identifier
        handle = resolution.handle
        file_name = f"{handle.resource_name}/ragFiles/{document_id}"
        try:
            await self.registry.delete_file(file_name)
        except RegistryError as exc:
            return build_error(
                f"Error deleting document: {exc}",
                {"corpus_name": identifier, "document_id": document_id},
            )

        return build_success(
            f"Successfully deleted document '{document_id}' from corpus '{handle.label}'",
            {
                "corpus_name": handle.resource_name,
                "corpus_display_name": handle.display_name,
                "document_id": document_id,
            },
        )

    # -------------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------------
    async def _guarded_resolve(
        self,
        corpus_name: Optional[str],
        state: SessionState,
        extra: dict[str, Any],
        missing_hint: str = "",
    ) -> tuple[Optional[Resolution], Optional[dict[str, Any]]]:
        """Existence guard followed by an exact-only resolve_target.

        Returns (resolution, None) on success, (None, error_response) otherwise.
        """
        identifier = self.resolver.select_identifier(corpus_name, state)
        if identifier is None:
            return None, build_error(NO_TARGET_MESSAGE, extra)

        try:
            exists = await self.resolver.check_corpus_exists(identifier, state)
        except RegistryUnavailable as exc:
            logger.error("Registry unavailable while checking %r: %s", identifier, exc)
            return None, build_error(f"Could not check whether corpus exists: {exc}", extra)
        missing = build_error(
            f"Corpus '{identifier}' does not exist. {missing_hint}".rstrip(),
            {**extra, "corpus_name": identifier},
        )
        if not exists:
            return None, missing

        resolution = await self.resolver.resolve_target(identifier, state, exact_only=True)
        if resolution.status is ResolutionStatus.NOT_FOUND:
            # A cached flag outlived the corpus it was recorded for.
            SessionCache(state).invalidate(identifier)
            return None, missing
        if not resolution.ok:
            return None, self._resolution_error(resolution, {**extra, "corpus_name": identifier})
        return resolution, None

    @staticmethod
    def _resolution_error(
        resolution: Resolution,
        extra: dict[str, Any],
        not_found_hint: str = "",
    ) -> dict[str, Any]:
        if resolution.status is ResolutionStatus.NO_TARGET:
            return build_error(NO_TARGET_MESSAGE, extra)
        if resolution.status is ResolutionStatus.NOT_FOUND:
            message = f"No corpus matching '{resolution.identifier}' was found."
            if not_found_hint:
                message = f"{message} {not_found_hint}"
            return build_error(message, extra)
        return build_error(f"Corpus registry unavailable: {resolution.error}", extra)
