# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent configuration.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer decides WHICH corpus tool to call and WHEN, and turns
#   tool responses into answers for the user.  It holds no corpus logic
#   (core/) and no tool wrappers (tools/).
# =============================================================================
