# =============================================================================
# agent/rag_agent.py  —  Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds the ADK agent that receives user requests, reasons about them and
#   calls the corpus tools.
#
# HOW IT WORKS (simplified):
#
#   ┌──────────────────────────────────────────────────────────────────┐
#   │                       Google ADK Agent                           │
#   │   instruction (prompt.py) ──▶ LLM ──▶ function tools             │
#   └──────────────────────────────────────────────────────────────────┘
#                                            │  tool_context.state
#                                            ▼
#                                 ┌─────────────────────┐
#                                 │ tools/adk_tools.py  │
#                                 └─────────────────────┘
#                                            │
#                                            ▼
#                                 ┌─────────────────────┐
#                                 │ core/ corpus logic  │──▶ Vertex AI RAG
#                                 └─────────────────────┘
#
# MODEL SELECTION:
#   RAG_AGENT_MODEL holds the model string.  A plain Gemini model id
#   ("gemini-2.0-flash-001") is passed to ADK directly.  A provider route
#   containing "/" ("openrouter/openai/gpt-4o") is wrapped in LiteLlm.
#
# TOOL TRANSPORT:
#   RAG_TOOL_TRANSPORT=function (default) attaches tools/adk_tools.py
#   directly.  RAG_TOOL_TRANSPORT=mcp starts tools/mcp_server.py as a stdio
#   subprocess and lets ADK discover the same seven tools over MCP.
# =============================================================================

import os
import sys
from typing import Optional, Union

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import RAG_AGENT_INSTRUCTION
from core.config import RagSettings
from tools.adk_tools import ALL_TOOLS


def build_model(model_name: str) -> Union[str, LiteLlm]:
    """Return the model argument for Agent(): a Gemini id or a LiteLlm route."""
    if "/" in model_name:
        return LiteLlm(model=model_name)
    return model_name


def build_mcp_toolset() -> MCPToolset:
    """Connect to tools/mcp_server.py as a stdio subprocess.

    The subprocess runs with the current interpreter from the project root,
    so it sees the same environment (and .env) as the agent.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return MCPToolset(
        connection_params=StdioServerParameters(
            command=sys.executable,
            args=["-m", "tools.mcp_server"],
            cwd=project_root,
        ),
    )


def create_agent(settings: Optional[RagSettings] = None) -> Agent:
    """Create the RAG corpus agent.

    Args:
        settings: Runtime settings.  Defaults to RagSettings.from_env().

    Returns:
        A configured Google ADK Agent.  With tool_transport "mcp" its tools
        come from the MCP server; otherwise the in-process function tools
        are used and corpus state lives in the ADK session.
    """
    settings = settings or RagSettings.from_env()

    if settings.tool_transport == "mcp":
        tools = [build_mcp_toolset()]
    else:
        tools = list(ALL_TOOLS)

    return Agent(
        name="rag_agent",
        model=build_model(settings.model),
        description="Vertex AI RAG corpus agent",
        instruction=RAG_AGENT_INSTRUCTION,
        tools=tools,
    )
