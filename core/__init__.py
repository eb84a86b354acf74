# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the corpus logic of the RAG agent: identifier
# canonicalization, ranked matching, the per-session cache, resolution, the
# Vertex AI registry gateway and the seven corpus operations.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports Google ADK or FastMCP.  Session state
#   arrives as a plain mapping argument, so everything here runs (and is
#   tested) without an agent framework.
# =============================================================================
