# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server (corpus tools for MCP clients)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Serves the same seven corpus tools as tools/adk_tools.py, but over MCP,
#   so any MCP client (Claude Desktop, an ADK MCPToolset, an IDE) can manage
#   and query Vertex AI RAG corpora.
#
# HOW IT WORKS (the flow):
#   1. An MCP client connects (stdio by default) and calls a tool by name
#   2. FastMCP routes the call to the decorated function below
#   3. The function looks up the state dict for THIS client session
#   4. CorpusService does the work (core/corpus_service.py)
#   5. The response dict goes back to the client
#
# SESSION STATE OVER MCP:
#   MCP has no equivalent of ADK's tool_context.state, so the server keeps
#   one dict per live MCP session, keyed weakly on the session object.  The
#   dict disappears when the client disconnects.
#
# RUNNING THIS SERVER:
#   python -m tools.mcp_server
# =============================================================================

import logging
import sys
import weakref
from typing import Any

from dotenv import load_dotenv
from fastmcp import Context, FastMCP

from tools.runtime import get_service
from tools.tool_logging import log_request, log_response, log_status

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP protocol; logs go to STDERR.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

mcp = FastMCP("vertex-rag-corpora")

_session_states: "weakref.WeakKeyDictionary[Any, dict[str, Any]]" = weakref.WeakKeyDictionary()


def session_state(ctx: Context) -> dict[str, Any]:
    """Return the state dict for the MCP session behind `ctx`."""
    session = ctx.session
    state = _session_states.get(session)
    if state is None:
        state = {}
        _session_states[session] = state
        log_status("New MCP session state created")
    return state


# =============================================================================
# TOOL: rag_query
# =============================================================================
@mcp.tool()
async def rag_query(corpus_name: str, query: str, ctx: Context) -> dict:
    """Query a Vertex AI RAG corpus and return the most relevant passages.

    Args:
        corpus_name: Display name, partial name or resource name of the
            corpus.  Empty string means the session's current corpus.
        query: The text to search for.

    Returns:
        A dict with status, message, corpus_name, results and results_count.
    """
    log_request("rag_query", corpus_name=corpus_name, query=query)
    result = await get_service().rag_query(corpus_name, query, session_state(ctx))
    return log_response("rag_query", result)


# =============================================================================
# TOOL: list_corpora
# =============================================================================
@mcp.tool()
async def list_corpora() -> dict:
    """List all available Vertex AI RAG corpora.

    Returns:
        A dict with corpora (resource_name, display_name, create_time,
        update_time).
    """
    log_request("list_corpora")
    result = await get_service().list_corpora()
    return log_response("list_corpora", result)


# =============================================================================
# TOOL: create_corpus
# =============================================================================
@mcp.tool()
async def create_corpus(corpus_name: str, ctx: Context) -> dict:
    """Create a new Vertex AI RAG corpus.  It becomes the current corpus.

    Args:
        corpus_name: The name for the new corpus.
    """
    log_request("create_corpus", corpus_name=corpus_name)
    result = await get_service().create_corpus(corpus_name, session_state(ctx))
    return log_response("create_corpus", result)


# =============================================================================
# TOOL: add_data
# =============================================================================
@mcp.tool()
async def add_data(corpus_name: str, paths: list[str], ctx: Context) -> dict:
    """Import Google Drive / Docs URLs or gs:// paths into a corpus.

    Args:
        corpus_name: Target corpus.  Empty string means the current corpus.
        paths: URLs or GCS paths to import.
    """
    log_request("add_data", corpus_name=corpus_name, paths=paths)
    result = await get_service().add_data(corpus_name, paths, session_state(ctx))
    return log_response("add_data", result)


# =============================================================================
# TOOL: get_corpus_info
# =============================================================================
@mcp.tool()
async def get_corpus_info(corpus_name: str, ctx: Context) -> dict:
    """Describe a corpus and list its files.

    Args:
        corpus_name: The corpus to describe.  Empty string means the current
            corpus.
    """
    log_request("get_corpus_info", corpus_name=corpus_name)
    result = await get_service().get_corpus_info(corpus_name, session_state(ctx))
    return log_response("get_corpus_info", result)


# =============================================================================
# TOOL: delete_corpus
# =============================================================================
@mcp.tool()
async def delete_corpus(corpus_name: str, ctx: Context) -> dict:
    """Delete a corpus.

    Args:
        corpus_name: The corpus to delete, preferably its resource_name.
    """
    log_request("delete_corpus", corpus_name=corpus_name)
    result = await get_service().delete_corpus(corpus_name, session_state(ctx))
    return log_response("delete_corpus", result)


# =============================================================================
# TOOL: delete_document
# =============================================================================
@mcp.tool()
async def delete_document(corpus_name: str, document_id: str, ctx: Context) -> dict:
    """Delete one document from a corpus.

    Args:
        corpus_name: The corpus containing the document.
        document_id: The file_id from get_corpus_info.
    """
    log_request("delete_document", corpus_name=corpus_name, document_id=document_id)
    result = await get_service().delete_document(
        corpus_name, document_id, session_state(ctx)
    )
    return log_response("delete_document", result)


# =============================================================================
# Server entry point
# =============================================================================
if __name__ == "__main__":
    load_dotenv()
    mcp.run()
