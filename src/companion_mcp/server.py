"""FastMCP server bootstrap for Companion."""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastmcp import Context, FastMCP

from . import __version__
from .config import CompanionSettings, get_settings
from .envs import EnvironmentStore
from .tools import register_tools
from .worktrees import WorktreeTracker


def configure_logging(level: str) -> None:
    """Configure root logging for the Companion server."""

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="[%(asctime)s] [%(levelname)s] %(name)s: %(message)s",
    )


def create_server(
    settings: Optional[CompanionSettings] = None,
    tracker: WorktreeTracker | None = None,
    envs: EnvironmentStore | None = None,
) -> FastMCP:
    """Instantiate the FastMCP server backed by the worktree and environment registries."""

    settings = settings or get_settings()
    tracker = tracker or WorktreeTracker(settings.companion_home)
    envs = envs or EnvironmentStore(settings.companion_home)

    server = FastMCP(
        name="Companion MCP",
        version=__version__,
        instructions=(
            "Companion keeps track of which coding-agent session uses which git "
            "worktree, and stores named environment variable profiles that can be "
            "applied to sessions."
        ),
    )

    handles = register_tools(server, tracker=tracker, envs=envs)

    @server.resource(
        "resource://companion/status",
        name="companion_status",
        title="Companion MCP Status",
        description="Summarizes tracked worktrees and saved environment profiles.",
        mime_type="application/json",
        tags={"status", "health"},
    )
    def status_resource(context: Context) -> str:
        """Return a JSON string summarizing both registries."""

        mappings = tracker.list_mappings()
        profiles = envs.list_envs()
        worktree_counts: dict[str, int] = {}
        for mapping in mappings:
            worktree_counts[mapping.worktree_path] = worktree_counts.get(mapping.worktree_path, 0) + 1

        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "server_version": __version__,
            "log_level": settings.log_level,
            "home": str(settings.companion_home),
            "worktrees": {
                "path": str(tracker.path),
                "session_count": len(mappings),
                "repos": sorted({mapping.repo_root for mapping in mappings}),
                "shared": sorted(path for path, count in worktree_counts.items() if count > 1),
            },
            "envs": {
                "path": str(envs.directory),
                "count": len(profiles),
                "slugs": [profile.slug for profile in profiles],
            },
            "request_id": getattr(context, "request_id", None),
        }
        return json.dumps(payload)

    setattr(server, "worktree_tracker", tracker)
    setattr(server, "env_store", envs)
    setattr(server, "tool_handles", handles)
    return server


def main() -> None:
    """Entry point for running the Companion MCP server via CLI."""

    settings = get_settings()
    configure_logging(settings.log_level)

    server = create_server(settings)
    logging.getLogger(__name__).info(
        "Launching Companion MCP server",
        extra={
            "version": __version__,
            "log_level": settings.log_level,
            "home": str(settings.companion_home),
        },
    )
    server.run()


if __name__ == "__main__":
    main()
