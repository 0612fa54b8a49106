"""Companion MCP: session worktree and environment profile registries."""

__version__ = "0.1.0"
