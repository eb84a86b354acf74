# =============================================================================
# tools/adk_tools.py  —  Google ADK Function Tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the seven corpus operations as Google ADK function tools.  ADK
#   reads each function's name, signature and docstring to build the tool
#   declaration the LLM sees, and injects `tool_context` on every call.
#
# SESSION STATE:
#   tool_context.state is ADK's per-session state.  It is passed straight
#   into core/, where the session cache keeps `current_corpus` and the
#   `corpus_exists_<name>` flags.  Because the state lives in the ADK
#   session, "the current corpus" follows the conversation across turns.
#
# EVERY TOOL:
#   1. logs the request (CYAN)
#   2. delegates to CorpusService (core/corpus_service.py)
#   3. logs and returns the response dict (GREEN)
# =============================================================================

from google.adk.tools import ToolContext

from tools.runtime import get_service
from tools.tool_logging import log_request, log_response


async def rag_query(corpus_name: str, query: str, tool_context: ToolContext) -> dict:
    """Query a Vertex AI RAG corpus with a user question and return relevant passages.

    WHEN TO CALL THIS: Whenever the user asks a question that should be
    answered from their documents.

    Args:
        corpus_name: The corpus to query.  A display name, a partial name or
            a full resource name all work.  Pass an empty string to use the
            current corpus.
        query: The text query to search for in the corpus.

    Returns:
        A dict with status, message, corpus_name, results (source_uri,
        source_name, text, score) and results_count.
    """
    log_request("rag_query", corpus_name=corpus_name, query=query)
    result = await get_service().rag_query(corpus_name, query, tool_context.state)
    return log_response("rag_query", result)


async def list_corpora() -> dict:
    """List all available Vertex AI RAG corpora.

    WHEN TO CALL THIS: When the user asks what corpora exist, or before
    acting on a corpus whose exact name you do not know.

    Returns:
        A dict with status, message and corpora, each with resource_name,
        display_name, create_time and update_time.
    """
    log_request("list_corpora")
    result = await get_service().list_corpora()
    return log_response("list_corpora", result)


async def create_corpus(corpus_name: str, tool_context: ToolContext) -> dict:
    """Create a new Vertex AI RAG corpus with the specified name.

    The new corpus becomes the current corpus.

    Args:
        corpus_name: The name for the new corpus.  Characters outside
            letters, digits, '_' and '-' are replaced with '_' in the
            display name.

    Returns:
        A dict with status, message, corpus_name, display_name and
        corpus_created.  status is "info" when the corpus already exists.
    """
    log_request("create_corpus", corpus_name=corpus_name)
    result = await get_service().create_corpus(corpus_name, tool_context.state)
    return log_response("create_corpus", result)


async def add_data(corpus_name: str, paths: list[str], tool_context: ToolContext) -> dict:
    """Add new data sources to a Vertex AI RAG corpus.

    Args:
        corpus_name: The corpus to add data to.  Pass an empty string to use
            the current corpus.
        paths: URLs or GCS paths to import.  Supported: Google Drive file
            URLs, Google Docs/Sheets/Slides URLs, and gs:// paths.

    Returns:
        A dict with status, message, files_added, the accepted paths, and
        invalid_paths / conversions when applicable.
    """
    log_request("add_data", corpus_name=corpus_name, paths=paths)
    result = await get_service().add_data(corpus_name, paths, tool_context.state)
    return log_response("add_data", result)


async def get_corpus_info(corpus_name: str, tool_context: ToolContext) -> dict:
    """Get detailed information about a specific RAG corpus, including its files.

    Args:
        corpus_name: The corpus to describe.  Prefer the resource_name from
            list_corpora results.  Pass an empty string to use the current
            corpus.

    Returns:
        A dict with corpus_name, corpus_display_name, file_count and files
        (file_id, display_name, create_time, update_time).
    """
    log_request("get_corpus_info", corpus_name=corpus_name)
    result = await get_service().get_corpus_info(corpus_name, tool_context.state)
    return log_response("get_corpus_info", result)


async def delete_corpus(corpus_name: str, tool_context: ToolContext) -> dict:
    """Delete a Vertex AI RAG corpus when it is no longer needed.

    Args:
        corpus_name: The corpus to delete.  Prefer the resource_name from
            list_corpora results.

    Returns:
        A dict with status, message and corpus_name.
    """
    log_request("delete_corpus", corpus_name=corpus_name)
    result = await get_service().delete_corpus(corpus_name, tool_context.state)
    return log_response("delete_corpus", result)


async def delete_document(
    corpus_name: str,
    document_id: str,
    tool_context: ToolContext,
) -> dict:
    """Delete a specific document from a Vertex AI RAG corpus.

    Args:
        corpus_name: The corpus containing the document.  Prefer the
            resource_name from list_corpora results.
        document_id: The file_id of the document, as shown by get_corpus_info.

    Returns:
        A dict with status, message, corpus_name and document_id.
    """
    log_request("delete_document", corpus_name=corpus_name, document_id=document_id)
    result = await get_service().delete_document(
        corpus_name, document_id, tool_context.state
    )
    return log_response("delete_document", result)


ALL_TOOLS = [
    rag_query,
    list_corpora,
    create_corpus,
    add_data,
    get_corpus_info,
    delete_corpus,
    delete_document,
]
