# =============================================================================
# core/registry.py  —  Vertex AI RAG Registry Gateway
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   The ONLY place that talks to Vertex AI RAG Engine.  Everything else in
#   the project (resolver, service, tools) goes through the CorpusRegistry
#   and ContextRetriever interfaces defined here, which is what lets the
#   tests swap in an in-memory registry.
#
# ASYNC CLIENTS:
#   Uses google-cloud-aiplatform's async clients against the regional
#   endpoint (<location>-aiplatform.googleapis.com).  Clients are created
#   lazily on first use.  Long-running operations (create, delete, import)
#   are awaited to completion before a method returns, so a corpus reported
#   as created is already visible in the next listing.
#
# ERRORS:
#   GoogleAPIError from a listing or metadata read → RegistryUnavailable
#   GoogleAPIError from a mutation                 → RegistryError
# =============================================================================

import logging
from typing import Any, Optional, Protocol, Sequence

from google.api_core import exceptions as google_exceptions
from google.cloud import aiplatform_v1

from core.config import RagSettings
from core.models import CorpusRecord, RagFileRecord, RetrievedContext

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """A registry call failed."""


class RegistryUnavailable(RegistryError):
    """Listing or metadata could not be read.  Says nothing about existence."""


# -----------------------------------------------------------------------------
# Interfaces
# -----------------------------------------------------------------------------
class CorpusRegistry(Protocol):
    async def list_corpora(self) -> list[CorpusRecord]: ...

    async def get_corpus(self, resource_name: str) -> CorpusRecord: ...

    async def list_files(self, resource_name: str) -> list[RagFileRecord]: ...

    async def create_corpus(self, display_name: str) -> CorpusRecord: ...

    async def delete_corpus(self, resource_name: str) -> None: ...

    async def import_files(
        self,
        resource_name: str,
        drive_file_ids: Sequence[str] = (),
        gcs_uris: Sequence[str] = (),
    ) -> int: ...

    async def delete_file(self, file_name: str) -> None: ...


class ContextRetriever(Protocol):
    async def retrieve_contexts(
        self, resource_name: str, query: str, top_k: int
    ) -> list[RetrievedContext]: ...


def timestamp_to_string(value: Any) -> str:
    """ISO-8601 string for a proto timestamp, "" when unset."""
    if not value:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _to_corpus_record(corpus: Any) -> CorpusRecord:
    return CorpusRecord(
        resource_name=corpus.name or "",
        display_name=corpus.display_name or "",
        create_time=timestamp_to_string(corpus.create_time),
        update_time=timestamp_to_string(corpus.update_time),
    )


def _to_file_record(rag_file: Any) -> RagFileRecord:
    return RagFileRecord(
        file_id=(rag_file.name or "").rsplit("/", 1)[-1],
        display_name=rag_file.display_name or "",
        create_time=timestamp_to_string(rag_file.create_time),
        update_time=timestamp_to_string(rag_file.update_time),
    )


# -----------------------------------------------------------------------------
# VertexRagRegistry — corpus management (VertexRagDataService)
# -----------------------------------------------------------------------------
class VertexRagRegistry:
    """CorpusRegistry backed by VertexRagDataServiceAsyncClient."""

    def __init__(self, settings: RagSettings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> aiplatform_v1.VertexRagDataServiceAsyncClient:
        if not self.settings.is_configured:
            raise RegistryError(
                "PROJECT_ID or LOCATION are not set. Please set environment variables."
            )
        if self._client is None:
            self._client = aiplatform_v1.VertexRagDataServiceAsyncClient(
                client_options={"api_endpoint": self.settings.api_endpoint},
            )
        return self._client

    async def list_corpora(self) -> list[CorpusRecord]:
        parent = self.settings.parent
        logger.debug("Listing corpora under %s", parent)
        try:
            pager = await self.client.list_rag_corpora(parent=parent)
            records = [_to_corpus_record(corpus) async for corpus in pager]
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryUnavailable(f"Error listing corpora: {exc}") from exc
        logger.debug("Found %d corpora", len(records))
        return records

    async def get_corpus(self, resource_name: str) -> CorpusRecord:
        try:
            corpus = await self.client.get_rag_corpus(name=resource_name)
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryUnavailable(f"Error getting corpus: {exc}") from exc
        return _to_corpus_record(corpus)

    async def list_files(self, resource_name: str) -> list[RagFileRecord]:
        try:
            pager = await self.client.list_rag_files(parent=resource_name)
            return [_to_file_record(rag_file) async for rag_file in pager]
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryUnavailable(f"Error listing files: {exc}") from exc

    async def create_corpus(self, display_name: str) -> CorpusRecord:
        try:
            operation = await self.client.create_rag_corpus(
                parent=self.settings.parent,
                rag_corpus=aiplatform_v1.RagCorpus(display_name=display_name),
            )
            logger.info("Create operation started: %s", operation.operation.name)
            corpus = await operation.result()
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryError(str(exc)) from exc
        return _to_corpus_record(corpus)

    async def delete_corpus(self, resource_name: str) -> None:
        try:
            operation = await self.client.delete_rag_corpus(name=resource_name)
            await operation.result()
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryError(str(exc)) from exc

    async def import_files(
        self,
        resource_name: str,
        drive_file_ids: Sequence[str] = (),
        gcs_uris: Sequence[str] = (),
    ) -> int:
        """Import Drive files and GCS objects; returns the imported file count.

        One import operation is started per source kind.  A failed operation
        is logged and skipped; if every operation fails the first error is
        raised.
        """
        configs = self._import_configs(drive_file_ids, gcs_uris)
        operations = []
        try:
            for config in configs:
                operations.append(
                    await self.client.import_rag_files(
                        parent=resource_name,
                        import_rag_files_config=config,
                    )
                )
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryError(str(exc)) from exc

        total = 0
        failures: list[Exception] = []
        for operation in operations:
            try:
                response = await operation.result()
            except google_exceptions.GoogleAPIError as exc:
                logger.warning("Import operation failed: %s", exc)
                failures.append(exc)
                continue
            total += response.imported_rag_files_count or 0

        if operations and len(failures) == len(operations):
            raise RegistryError(str(failures[0])) from failures[0]
        return total

    async def delete_file(self, file_name: str) -> None:
        try:
            operation = await self.client.delete_rag_file(name=file_name)
            await operation.result()
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryError(str(exc)) from exc

    def _import_configs(
        self,
        drive_file_ids: Sequence[str],
        gcs_uris: Sequence[str],
    ) -> list[aiplatform_v1.ImportRagFilesConfig]:
        chunking = aiplatform_v1.RagFileChunkingConfig(
            fixed_length_chunking=aiplatform_v1.RagFileChunkingConfig.FixedLengthChunking(
                chunk_size=self.settings.chunk_size,
                chunk_overlap=self.settings.chunk_overlap,
            ),
        )
        transformation = aiplatform_v1.RagFileTransformationConfig(
            rag_file_chunking_config=chunking,
        )

        configs = []
        if drive_file_ids:
            resource_id = aiplatform_v1.GoogleDriveSource.ResourceId
            configs.append(
                aiplatform_v1.ImportRagFilesConfig(
                    google_drive_source=aiplatform_v1.GoogleDriveSource(
                        resource_ids=[
                            resource_id(
                                resource_type=resource_id.ResourceType.RESOURCE_TYPE_FILE,
                                resource_id=file_id,
                            )
                            for file_id in drive_file_ids
                        ],
                    ),
                    rag_file_transformation_config=transformation,
                    max_embedding_requests_per_min=self.settings.embedding_requests_per_min,
                )
            )
        if gcs_uris:
            configs.append(
                aiplatform_v1.ImportRagFilesConfig(
                    gcs_source=aiplatform_v1.GcsSource(uris=list(gcs_uris)),
                    rag_file_transformation_config=transformation,
                    max_embedding_requests_per_min=self.settings.embedding_requests_per_min,
                )
            )
        return configs


# -----------------------------------------------------------------------------
# VertexRagRetriever — retrieval (VertexRagService)
# -----------------------------------------------------------------------------
class VertexRagRetriever:
    """ContextRetriever backed by VertexRagServiceAsyncClient."""

    def __init__(self, settings: RagSettings, client: Optional[Any] = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> aiplatform_v1.VertexRagServiceAsyncClient:
        if self._client is None:
            self._client = aiplatform_v1.VertexRagServiceAsyncClient(
                client_options={"api_endpoint": self.settings.api_endpoint},
            )
        return self._client

    async def retrieve_contexts(
        self, resource_name: str, query: str, top_k: int
    ) -> list[RetrievedContext]:
        store = aiplatform_v1.RetrieveContextsRequest.VertexRagStore
        request = aiplatform_v1.RetrieveContextsRequest(
            parent=self.settings.parent,
            vertex_rag_store=store(
                rag_resources=[store.RagResource(rag_corpus=resource_name)],
            ),
            query=aiplatform_v1.RagQuery(
                text=query,
                rag_retrieval_config=aiplatform_v1.RagRetrievalConfig(top_k=top_k),
            ),
        )
        try:
            response = await self.client.retrieve_contexts(request=request)
        except google_exceptions.GoogleAPIError as exc:
            raise RegistryError(str(exc)) from exc

        return [
            RetrievedContext(
                source_uri=context.source_uri or "",
                source_name=context.source_display_name or "",
                text=context.text or "",
                score=context.score or 0.0,
            )
            for context in response.contexts.contexts
        ]
