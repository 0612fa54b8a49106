"""Tool registration for Companion MCP."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastmcp import Context, FastMCP

from ..envs import EnvCollisionError, EnvironmentStore
from ..files import now_ms
from ..worktrees import WorktreeMapping, WorktreeTracker

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ToolHandles:
    list_envs: Any
    get_env: Any
    create_env: Any
    update_env: Any
    delete_env: Any
    list_worktrees: Any
    track_worktree: Any
    release_worktree: Any
    worktree_status: Any


def register_tools(
    server: FastMCP,
    *,
    tracker: WorktreeTracker,
    envs: EnvironmentStore,
) -> ToolHandles:
    """Register Companion's MCP tools on the server."""

    def _list_envs(context: Context | None = None) -> list[dict[str, Any]]:
        """List environment profiles sorted by name."""

        return [profile.to_json() for profile in envs.list_envs()]

    def _get_env(slug: str, context: Context | None = None) -> dict[str, Any] | None:
        profile = envs.get_env(slug)
        return profile.to_json() if profile is not None else None

    def _create_env(
        name: str,
        variables: dict[str, str] | None = None,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Create a named environment profile."""

        try:
            profile = envs.create_env(name, variables)
        except EnvCollisionError as exc:
            raise ValueError(str(exc)) from exc
        _emit_log(context, "info", "Environment created", extra={"slug": profile.slug})
        return profile.to_json()

    def _update_env(
        slug: str,
        name: str | None = None,
        variables: dict[str, str] | None = None,
        context: Context | None = None,
    ) -> dict[str, Any] | None:
        """Rename a profile and/or replace its variables."""

        try:
            profile = envs.update_env(slug, name=name, variables=variables)
        except EnvCollisionError as exc:
            raise ValueError(str(exc)) from exc
        if profile is None:
            return None
        _emit_log(
            context,
            "info",
            "Environment updated",
            extra={"slug": profile.slug, "previous_slug": slug},
        )
        return profile.to_json()

    def _delete_env(slug: str, context: Context | None = None) -> dict[str, Any]:
        deleted = envs.delete_env(slug)
        if deleted:
            _emit_log(context, "info", "Environment deleted", extra={"slug": slug})
        return {"slug": slug, "deleted": deleted}

    tool_list_envs = server.tool(
        name="list_envs",
        description="List saved environment profiles with their variables.",
    )(_list_envs)

    tool_get_env = server.tool(
        name="get_env",
        description="Fetch one environment profile by slug; returns null when it does not exist.",
    )(_get_env)

    tool_create_env = server.tool(
        name="create_env",
        description=(
            "Create an environment profile from a display name and optional variables. "
            "The slug is derived from the name and must be unique."
        ),
    )(_create_env)

    tool_update_env = server.tool(
        name="update_env",
        description=(
            "Update an environment profile. Changing the name may change its slug; "
            "returns null when the slug does not exist."
        ),
    )(_update_env)

    tool_delete_env = server.tool(
        name="delete_env",
        description="Delete an environment profile by slug.",
    )(_delete_env)

    def _list_worktrees(
        repo_root: str | None = None,
        worktree_path: str | None = None,
        context: Context | None = None,
    ) -> list[dict[str, Any]]:
        """List tracked session worktrees, optionally filtered."""

        if worktree_path is not None:
            mappings = tracker.get_sessions_for_worktree(worktree_path)
        else:
            mappings = tracker.list_mappings()
        if repo_root is not None:
            mappings = [m for m in mappings if m.repo_root == repo_root]
        return [mapping.to_json() for mapping in mappings]

    def _track_worktree(
        session_id: str,
        repo_root: str,
        branch: str,
        worktree_path: str,
        context: Context | None = None,
    ) -> dict[str, Any]:
        """Record that a session runs inside a worktree."""

        mapping = WorktreeMapping(
            session_id=session_id,
            repo_root=repo_root,
            branch=branch,
            worktree_path=worktree_path,
            created_at=now_ms(),
        )
        tracker.add_mapping(mapping)
        _emit_log(
            context,
            "info",
            "Worktree tracked",
            extra={"session_id": session_id, "worktree_path": worktree_path},
        )
        return mapping.to_json()

    def _release_worktree(session_id: str, context: Context | None = None) -> dict[str, Any]:
        """Forget a session's worktree and report whether others still use it."""

        removed = tracker.remove_by_session(session_id)
        if removed is None:
            return {"sessionId": session_id, "released": None, "worktreeInUse": False}

        in_use = tracker.is_worktree_in_use(removed.worktree_path)
        _emit_log(
            context,
            "info",
            "Worktree released",
            extra={
                "session_id": session_id,
                "worktree_path": removed.worktree_path,
                "still_in_use": in_use,
            },
        )
        return {"sessionId": session_id, "released": removed.to_json(), "worktreeInUse": in_use}

    def _worktree_status(
        worktree_path: str,
        exclude_session_id: str | None = None,
        context: Context | None = None,
    ) -> dict[str, Any]:
        sessions = tracker.get_sessions_for_worktree(worktree_path)
        return {
            "worktreePath": worktree_path,
            "inUse": tracker.is_worktree_in_use(worktree_path, exclude_session_id),
            "sessions": [mapping.session_id for mapping in sessions],
        }

    tool_list_worktrees = server.tool(
        name="list_worktrees",
        description="List session to worktree mappings, filtered by repo_root or worktree_path.",
    )(_list_worktrees)

    tool_track_worktree = server.tool(
        name="track_worktree",
        description=(
            "Associate a session with a git worktree. Replaces any previous mapping "
            "for the same session."
        ),
    )(_track_worktree)

    tool_release_worktree = server.tool(
        name="release_worktree",
        description=(
            "Remove a session's worktree mapping. The response says whether another "
            "session still uses the worktree, so callers know if it is safe to remove."
        ),
    )(_release_worktree)

    tool_worktree_status = server.tool(
        name="worktree_status",
        description="Report which sessions use a worktree and whether it is in use.",
    )(_worktree_status)

    return ToolHandles(
        list_envs=tool_list_envs,
        get_env=tool_get_env,
        create_env=tool_create_env,
        update_env=tool_update_env,
        delete_env=tool_delete_env,
        list_worktrees=tool_list_worktrees,
        track_worktree=tool_track_worktree,
        release_worktree=tool_release_worktree,
        worktree_status=tool_worktree_status,
    )


__all__ = ["register_tools", "ToolHandles"]


def _emit_log(
    context: Context | None,
    level: str,
    message: str,
    *,
    extra: dict[str, Any] | None = None,
) -> None:
    """Best-effort logging that prefers the MCP context logger when available."""

    payload = extra or {}

    if context is not None:
        ctx_logger = getattr(context, "logger", None)
        if ctx_logger is not None:
            log_method = getattr(ctx_logger, level, None)
            if callable(log_method):
                log_method(message, extra=payload)
                return

    fallback = getattr(logger, level, logger.info)
    fallback(message, extra=payload)
