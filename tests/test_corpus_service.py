"""
Tests for core.corpus_service.

Exercises the seven corpus operations end-to-end against the in-memory
registry and retriever, including session-state effects.
"""

from __future__ import annotations

import pytest

from core.config import NOT_CONFIGURED_MESSAGE, RagSettings
from core.corpus_service import NO_TARGET_MESSAGE, CorpusService
from core.models import RagFileRecord, RetrievedContext
from core.session_cache import CURRENT_CORPUS_KEY, exists_key

from tests.conftest import PARENT

NOTES = f"{PARENT}/ragCorpora/111"


@pytest.fixture()
def unconfigured(registry, retriever) -> CorpusService:
    return CorpusService(RagSettings(project_id=None, location=None), registry, retriever)


class TestRagQuery:
    @pytest.mark.asyncio
    async def test_success_sets_current_corpus(self, service, retriever, state) -> None:
        retriever.contexts[NOTES] = [
            RetrievedContext("gs://b/a.pdf", "a.pdf", "alpha text", 0.9),
            RetrievedContext("gs://b/b.pdf", "b.pdf", "beta text", 0.7),
        ]

        result = await service.rag_query("notes", "  what is alpha? ", state)

        assert result["status"] == "success"
        assert result["corpus_name"] == "Research Notes"
        assert result["query"] == "what is alpha?"
        assert result["results_count"] == 2
        assert result["results"][0] == {
            "source_uri": "gs://b/a.pdf",
            "source_name": "a.pdf",
            "text": "alpha text",
            "score": 0.9,
        }
        assert retriever.calls == [(NOTES, "what is alpha?", 3)]
        assert state[CURRENT_CORPUS_KEY] == "Research Notes"

    @pytest.mark.asyncio
    async def test_follow_up_uses_current_corpus(self, service, retriever, state) -> None:
        retriever.contexts[NOTES] = [RetrievedContext("u", "n", "t", 0.5)]
        await service.rag_query("research", "first", state)

        result = await service.rag_query("", "second", state)

        assert result["status"] == "success"
        assert retriever.calls[-1][0] == NOTES

    @pytest.mark.asyncio
    async def test_no_results_is_warning_and_keeps_current(self, service, state) -> None:
        state[CURRENT_CORPUS_KEY] = "Product Docs"
        result = await service.rag_query("notes", "anything", state)

        assert result["status"] == "warning"
        assert result["results"] == []
        assert result["results_count"] == 0
        assert state[CURRENT_CORPUS_KEY] == "Product Docs"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   ", None])
    async def test_blank_query_rejected_before_registry(self, service, registry, state, query) -> None:
        result = await service.rag_query("notes", query, state)

        assert result["status"] == "error"
        assert result["message"] == "A non-empty query is required."
        assert registry.list_calls == 0

    @pytest.mark.asyncio
    async def test_no_target(self, service, registry, state) -> None:
        result = await service.rag_query("", "question", state)

        assert result["status"] == "error"
        assert result["message"] == NO_TARGET_MESSAGE
        assert registry.list_calls == 0

    @pytest.mark.asyncio
    async def test_not_found(self, service, state) -> None:
        result = await service.rag_query("zzz", "question", state)

        assert result["status"] == "error"
        assert "No corpus matching 'zzz' was found" in result["message"]
        assert state == {}

    @pytest.mark.asyncio
    async def test_registry_outage(self, service, registry, state) -> None:
        registry.unavailable = True
        result = await service.rag_query("notes", "question", state)

        assert result["status"] == "error"
        assert "registry unavailable" in result["message"]

    @pytest.mark.asyncio
    async def test_retrieval_failure(self, service, retriever, state) -> None:
        retriever.fail = True
        result = await service.rag_query("notes", "question", state)

        assert result["status"] == "error"
        assert result["message"].startswith("Error querying corpus:")
        assert result["corpus_name"] == "Research Notes"


class TestListCorpora:
    @pytest.mark.asyncio
    async def test_lists_all(self, service) -> None:
        result = await service.list_corpora()

        assert result["status"] == "success"
        assert result["message"] == "Found 3 available corpora"
        assert result["corpora"][0] == {
            "resource_name": NOTES,
            "display_name": "Research Notes",
            "create_time": "2025-01-01T00:00:00+00:00",
            "update_time": "2025-01-02T00:00:00+00:00",
        }

    @pytest.mark.asyncio
    async def test_outage(self, service, registry) -> None:
        registry.unavailable = True
        result = await service.list_corpora()
        assert result["status"] == "error"
        assert result["corpora"] == []

    @pytest.mark.asyncio
    async def test_unconfigured(self, unconfigured, registry) -> None:
        result = await unconfigured.list_corpora()
        assert result == {"status": "error", "message": NOT_CONFIGURED_MESSAGE, "corpora": []}
        assert registry.list_calls == 0


class TestCreateCorpus:
    @pytest.mark.asyncio
    async def test_creates_and_selects(self, service, registry, state) -> None:
        result = await service.create_corpus("Field Notes", state)

        assert result["status"] == "success"
        assert result["corpus_created"] is True
        assert result["display_name"] == "Field_Notes"
        assert result["corpus_name"].startswith(f"{PARENT}/ragCorpora/")
        assert any(r.display_name == "Field_Notes" for r in registry.corpora)
        assert state[exists_key("Field Notes")] is True
        assert state[CURRENT_CORPUS_KEY] == "Field_Notes"

    @pytest.mark.asyncio
    async def test_created_corpus_is_queryable_as_current(self, service, retriever, state) -> None:
        created = await service.create_corpus("Field Notes", state)
        retriever.contexts[created["corpus_name"]] = [RetrievedContext("u", "n", "t", 1.0)]

        result = await service.rag_query("", "question", state)

        assert result["status"] == "success"
        assert result["corpus_name"] == "Field_Notes"

    @pytest.mark.asyncio
    async def test_existing_corpus_is_info(self, service, registry, state) -> None:
        result = await service.create_corpus("Research Notes", state)

        assert result["status"] == "info"
        assert result["corpus_created"] is False
        assert len(registry.corpora) == 3

    @pytest.mark.asyncio
    async def test_outage_does_not_create(self, service, registry, state) -> None:
        registry.unavailable = True
        result = await service.create_corpus("New", state)

        assert result["status"] == "error"
        assert len(registry.corpora) == 3

    @pytest.mark.asyncio
    async def test_failure_leaves_state_untouched(self, service, registry, state) -> None:
        registry.fail_mutations = True
        result = await service.create_corpus("New", state)

        assert result["status"] == "error"
        assert result["message"].startswith("Error creating corpus:")
        assert state == {}

    @pytest.mark.asyncio
    async def test_blank_name(self, service, state) -> None:
        result = await service.create_corpus("  ", state)
        assert result["status"] == "error"


class TestAddData:
    @pytest.mark.asyncio
    async def test_imports_drive_and_gcs(self, service, registry, state) -> None:
        result = await service.add_data(
            "Research Notes",
            [
                "https://docs.google.com/document/d/doc1/edit",
                "gs://bucket/report.pdf",
                "ftp://nope",
            ],
            state,
        )

        assert result["status"] == "success"
        assert result["files_added"] == 2
        assert "(Converted Google Docs URLs to Drive format)" in result["message"]
        assert result["invalid_paths"] == ["ftp://nope (Invalid format)"]
        assert registry.imports == [(NOTES, ["doc1"], ["gs://bucket/report.pdf"])]
        assert result["corpus_name"] == NOTES
        assert result["corpus_display_name"] == "Research Notes"
        assert state[CURRENT_CORPUS_KEY] == "Research Notes"

    @pytest.mark.asyncio
    async def test_partial_name_is_not_enough_to_import(self, service, registry, state) -> None:
        state[exists_key("docs")] = True

        result = await service.add_data("docs", ["gs://b/x"], state)

        assert result["status"] == "error"
        assert registry.imports == []

    @pytest.mark.asyncio
    async def test_no_valid_paths(self, service, registry, state) -> None:
        result = await service.add_data("Research Notes", ["not a url"], state)

        assert result["status"] == "error"
        assert result["invalid_paths"] == ["not a url (Invalid format)"]
        assert registry.list_calls == 0

    @pytest.mark.asyncio
    async def test_missing_corpus(self, service, registry, state) -> None:
        result = await service.add_data("Nope", ["gs://b/x"], state)

        assert result["status"] == "error"
        assert "Please create it first using the create_corpus tool." in result["message"]
        assert registry.imports == []

    @pytest.mark.asyncio
    async def test_uses_current_corpus(self, service, registry, state) -> None:
        state[CURRENT_CORPUS_KEY] = "Product Docs"
        result = await service.add_data("", ["gs://b/x"], state)

        assert result["status"] == "success"
        assert registry.imports[0][0] == f"{PARENT}/ragCorpora/222"
        assert "conversions" not in result

    @pytest.mark.asyncio
    async def test_import_failure(self, service, registry, state) -> None:
        registry.fail_mutations = True
        result = await service.add_data("Research Notes", ["gs://b/x"], state)
        assert result["status"] == "error"
        assert result["message"].startswith("Error adding data to corpus:")


class TestGetCorpusInfo:
    @pytest.mark.asyncio
    async def test_describes_files(self, service, registry, state) -> None:
        registry.files[NOTES] = [RagFileRecord("f1", "a.pdf", "t1", "t2")]

        result = await service.get_corpus_info("Research Notes", state)

        assert result["status"] == "success"
        assert result["corpus_name"] == NOTES
        assert result["corpus_display_name"] == "Research Notes"
        assert result["file_count"] == 1
        assert result["files"] == [
            {"file_id": "f1", "display_name": "a.pdf", "create_time": "t1", "update_time": "t2"}
        ]

    @pytest.mark.asyncio
    async def test_file_listing_failure_tolerated(self, service, registry, state) -> None:
        registry.fail_file_listing = True
        result = await service.get_corpus_info(NOTES, state)

        assert result["status"] == "success"
        assert result["files"] == []

    @pytest.mark.asyncio
    async def test_partial_name_fails_existence_guard(self, service, state) -> None:
        result = await service.get_corpus_info("notes", state)

        assert result["status"] == "error"
        assert result["message"] == "Corpus 'notes' does not exist."


class TestDeleteCorpus:
    @pytest.mark.asyncio
    async def test_delete_invalidates_but_keeps_current(self, service, registry, retriever, state) -> None:
        result = await service.delete_corpus("Research Notes", state)

        assert result["status"] == "success"
        assert all(r.resource_name != NOTES for r in registry.corpora)
        assert state[exists_key("Research Notes")] is False
        assert state[CURRENT_CORPUS_KEY] == "Research Notes"

        follow_up = await service.rag_query("", "anything", state)
        assert follow_up["status"] == "error"
        assert "No corpus matching 'Research Notes'" in follow_up["message"]

    @pytest.mark.asyncio
    async def test_partial_name_from_earlier_query_cannot_delete_another_corpus(
        self, service, registry, retriever, state
    ) -> None:
        retriever.contexts[NOTES] = [RetrievedContext("u", "n", "t", 0.5)]
        assert (await service.rag_query("notes", "q", state))["status"] == "success"
        assert (await service.delete_corpus("Research Notes", state))["status"] == "success"
        created = await service.create_corpus("Notes B", state)

        result = await service.delete_corpus("notes", state)

        assert result["status"] == "error"
        assert result["message"] == "Corpus 'notes' does not exist."
        assert any(r.resource_name == created["corpus_name"] for r in registry.corpora)
        assert state[exists_key("notes")] is False

    @pytest.mark.asyncio
    async def test_reports_the_corpus_actually_deleted(self, service, state) -> None:
        result = await service.delete_corpus(NOTES, state)

        assert result["message"] == "Successfully deleted corpus 'Research Notes'"
        assert result["corpus_name"] == NOTES
        assert result["corpus_display_name"] == "Research Notes"

    @pytest.mark.asyncio
    async def test_delete_missing(self, service, state) -> None:
        result = await service.delete_corpus("ghost", state)
        assert result["status"] == "error"
        assert result["message"] == "Corpus 'ghost' does not exist."

    @pytest.mark.asyncio
    async def test_delete_failure_keeps_cache(self, service, registry, state) -> None:
        registry.fail_mutations = True
        result = await service.delete_corpus("Research Notes", state)

        assert result["status"] == "error"
        assert state[exists_key("Research Notes")] is True


class TestDeleteDocument:
    @pytest.mark.asyncio
    async def test_deletes_file_under_resolved_corpus(self, service, registry, state) -> None:
        result = await service.delete_document("Research Notes", "file-9", state)

        assert result["status"] == "success"
        assert registry.deleted_files == [f"{NOTES}/ragFiles/file-9"]

    @pytest.mark.asyncio
    async def test_reports_resolved_corpus(self, service, state) -> None:
        result = await service.delete_document(NOTES, "file-9", state)

        assert result["message"] == (
            "Successfully deleted document 'file-9' from corpus 'Research Notes'"
        )
        assert result["corpus_name"] == NOTES

    @pytest.mark.asyncio
    async def test_requires_document_id(self, service, registry, state) -> None:
        result = await service.delete_document("Research Notes", " ", state)

        assert result["status"] == "error"
        assert registry.list_calls == 0


@pytest.mark.asyncio
async def test_every_operation_reports_missing_configuration(unconfigured, registry, state) -> None:
    results = [
        await unconfigured.rag_query("notes", "q", state),
        await unconfigured.create_corpus("x", state),
        await unconfigured.add_data("x", ["gs://b/x"], state),
        await unconfigured.get_corpus_info("x", state),
        await unconfigured.delete_corpus("x", state),
        await unconfigured.delete_document("x", "d", state),
    ]

    assert all(r["message"] == NOT_CONFIGURED_MESSAGE for r in results)
    assert registry.list_calls == 0
