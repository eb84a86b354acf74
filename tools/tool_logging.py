# =============================================================================
# tools/tool_logging.py  —  Colored Request/Response Logging for Tools
# =============================================================================
#
# Every tool call logs three kinds of lines:
#     CYAN   → the incoming call and its parameters
#     YELLOW → intermediate status ("resolved X", "cache hit")
#     GREEN  → the compact JSON response
#
# Output goes through the stdlib logging module.  When the MCP server runs
# over stdio, logging is configured to STDERR so it never mixes with the
# protocol stream on STDOUT.
# =============================================================================

import json
import logging

_CYAN = "\033[36m"     # Requests (tool calls with params)
_GREEN = "\033[32m"    # Responses (JSON output)
_YELLOW = "\033[33m"   # Status/progress messages
_RESET = "\033[0m"

logger = logging.getLogger("rag_agent.tools")


def log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def log_response(tool_name: str, result: dict) -> dict:
    """Log the tool response as compact JSON in GREEN, then return it."""
    logger.info(
        f"{_GREEN}  ← {tool_name} response: "
        f"{json.dumps(result, separators=(',', ':'), default=str)}{_RESET}"
    )
    return result
