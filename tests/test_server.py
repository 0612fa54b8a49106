from __future__ import annotations

from pathlib import Path

from companion_mcp.config import CompanionSettings
from companion_mcp.envs import EnvironmentStore
from companion_mcp.server import create_server
from companion_mcp.worktrees import WorktreeTracker


def test_create_server_uses_configured_home(tmp_path: Path) -> None:
    settings = CompanionSettings(_env_file=None)
    settings.companion_home = tmp_path

    server = create_server(settings)

    tracker = getattr(server, "worktree_tracker")
    envs = getattr(server, "env_store")
    assert isinstance(tracker, WorktreeTracker)
    assert tracker.path == tmp_path / "worktrees.json"
    assert isinstance(envs, EnvironmentStore)
    assert envs.directory == tmp_path / "envs"


def test_create_server_accepts_injected_registries(tmp_path: Path) -> None:
    tracker = WorktreeTracker(tmp_path / "a")
    envs = EnvironmentStore(tmp_path / "b")

    server = create_server(CompanionSettings(_env_file=None), tracker=tracker, envs=envs)

    assert getattr(server, "worktree_tracker") is tracker
    assert getattr(server, "env_store") is envs
    handles = getattr(server, "tool_handles")
    assert handles.list_envs is not None
