# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the tool front-ends for the corpus operations.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between an agent framework and core/:
#     - adk_tools.py  → Google ADK function tools (state = tool_context.state)
#     - mcp_server.py → FastMCP server (state = one dict per MCP session)
#   Both log each call and delegate to the shared CorpusService
#   (runtime.py).  Neither contains corpus logic.
#
# TOOL CONTRACT QUALITY:
#   The LLM reads each tool's name, parameters and docstring to decide when
#   and how to call it, so those are kept precise.
# =============================================================================
