"""
Shared fixtures for the corpus agent tests.

Provides settings, a plain-dict session state, and an in-memory registry and
retriever that implement the gateway interfaces from core/registry.py and
count how often the registry listing is called.
"""

from __future__ import annotations

import itertools
from typing import Optional, Sequence

import pytest

from core.config import RagSettings
from core.corpus_service import CorpusService
from core.models import CorpusRecord, RagFileRecord, RetrievedContext
from core.registry import RegistryError, RegistryUnavailable

PARENT = "projects/test-project/locations/us-central1"


def corpus(corpus_id: str, display_name: str = "") -> CorpusRecord:
    return CorpusRecord(
        resource_name=f"{PARENT}/ragCorpora/{corpus_id}",
        display_name=display_name,
        create_time="2025-01-01T00:00:00+00:00",
        update_time="2025-01-02T00:00:00+00:00",
    )


class FakeRegistry:
    """In-memory CorpusRegistry."""

    def __init__(self, corpora: Optional[list[CorpusRecord]] = None):
        self.corpora: list[CorpusRecord] = list(corpora or [])
        self.files: dict[str, list[RagFileRecord]] = {}
        self.list_calls = 0
        self.unavailable = False
        self.fail_mutations = False
        self.fail_file_listing = False
        self.imports: list[tuple[str, list[str], list[str]]] = []
        self.deleted_files: list[str] = []
        self._ids = itertools.count(1000)

    async def list_corpora(self) -> list[CorpusRecord]:
        self.list_calls += 1
        if self.unavailable:
            raise RegistryUnavailable("Error listing corpora: 503 Service Unavailable")
        return list(self.corpora)

    async def get_corpus(self, resource_name: str) -> CorpusRecord:
        if self.unavailable:
            raise RegistryUnavailable("Error getting corpus: 503 Service Unavailable")
        for record in self.corpora:
            if record.resource_name == resource_name:
                return record
        raise RegistryUnavailable(f"Error getting corpus: 404 {resource_name}")

    async def list_files(self, resource_name: str) -> list[RagFileRecord]:
        if self.fail_file_listing:
            raise RegistryUnavailable("Error listing files: 500")
        return list(self.files.get(resource_name, []))

    async def create_corpus(self, display_name: str) -> CorpusRecord:
        if self.fail_mutations:
            raise RegistryError("400 quota exceeded")
        record = corpus(str(next(self._ids)), display_name)
        self.corpora.append(record)
        return record

    async def delete_corpus(self, resource_name: str) -> None:
        if self.fail_mutations:
            raise RegistryError("403 permission denied")
        self.corpora = [r for r in self.corpora if r.resource_name != resource_name]

    async def import_files(
        self,
        resource_name: str,
        drive_file_ids: Sequence[str] = (),
        gcs_uris: Sequence[str] = (),
    ) -> int:
        if self.fail_mutations:
            raise RegistryError("500 import failed")
        self.imports.append((resource_name, list(drive_file_ids), list(gcs_uris)))
        return len(drive_file_ids) + len(gcs_uris)

    async def delete_file(self, file_name: str) -> None:
        if self.fail_mutations:
            raise RegistryError("404 file not found")
        self.deleted_files.append(file_name)


class FakeRetriever:
    """In-memory ContextRetriever returning canned contexts per corpus."""

    def __init__(self):
        self.contexts: dict[str, list[RetrievedContext]] = {}
        self.calls: list[tuple[str, str, int]] = []
        self.fail = False

    async def retrieve_contexts(
        self, resource_name: str, query: str, top_k: int
    ) -> list[RetrievedContext]:
        self.calls.append((resource_name, query, top_k))
        if self.fail:
            raise RegistryError("deadline exceeded")
        return list(self.contexts.get(resource_name, []))[:top_k]


@pytest.fixture()
def settings() -> RagSettings:
    return RagSettings(project_id="test-project", location="us-central1")


@pytest.fixture()
def state() -> dict:
    return {}


@pytest.fixture()
def registry() -> FakeRegistry:
    return FakeRegistry(
        [
            corpus("111", "Research Notes"),
            corpus("222", "Product Docs"),
            corpus("333", "meeting_minutes"),
        ]
    )


@pytest.fixture()
def retriever() -> FakeRetriever:
    return FakeRetriever()


@pytest.fixture()
def service(settings, registry, retriever) -> CorpusService:
    return CorpusService(settings=settings, registry=registry, retriever=retriever)
