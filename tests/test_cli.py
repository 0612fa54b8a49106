from __future__ import annotations

import argparse
import importlib.util
import json
from pathlib import Path

import pytest

from companion_mcp.envs import EnvironmentStore
from companion_mcp.worktrees import WorktreeMapping, WorktreeTracker


def _load_diag(module_name: str):
    module_path = Path(__file__).resolve().parents[1] / "scripts" / "companion_diag.py"
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    assert spec and spec.loader
    diag = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(diag)
    return diag


@pytest.fixture
def home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("COMPANION_HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _seed_worktrees(home: Path) -> None:
    tracker = WorktreeTracker(home)
    for session_id, repo, path in [
        ("s1", "/repo-a", "/worktrees/shared"),
        ("s2", "/repo-a", "/worktrees/shared"),
        ("s3", "/repo-b", "/worktrees/solo"),
    ]:
        tracker.add_mapping(
            WorktreeMapping(
                session_id=session_id,
                repo_root=repo,
                branch="feat",
                worktree_path=path,
                created_at=1,
            )
        )


def test_envs_json_output(home: Path, capsys) -> None:
    store = EnvironmentStore(home)
    store.create_env("Zebra")
    store.create_env("Alpha", {"A": "1"})
    diag = _load_diag("companion_diag_envs_module")

    diag.cmd_envs(argparse.Namespace(json=True))

    payload = json.loads(capsys.readouterr().out)
    assert [entry["slug"] for entry in payload] == ["alpha", "zebra"]
    assert payload[0]["variables"] == {"A": "1"}


def test_envs_text_output(home: Path, capsys) -> None:
    EnvironmentStore(home).create_env("My App", {"A": "1", "B": "2"})
    diag = _load_diag("companion_diag_envs_text_module")

    diag.main(["envs"])

    assert capsys.readouterr().out.strip() == "my-app [My App] -> 2 variables"


def test_worktrees_filters(home: Path, capsys) -> None:
    _seed_worktrees(home)
    diag = _load_diag("companion_diag_worktrees_module")

    diag.main(["worktrees", "--repo", "/repo-b", "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert [entry["sessionId"] for entry in payload] == ["s3"]

    diag.main(["worktrees", "--worktree", "/worktrees/shared", "--json"])
    payload = json.loads(capsys.readouterr().out)
    assert [entry["sessionId"] for entry in payload] == ["s1", "s2"]


def test_worktrees_text_marks_shared(home: Path, capsys) -> None:
    _seed_worktrees(home)
    diag = _load_diag("companion_diag_worktrees_text_module")

    diag.main(["worktrees"])

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "s1 [feat] -> /worktrees/shared (shared)",
        "s2 [feat] -> /worktrees/shared (shared)",
        "s3 [feat] -> /worktrees/solo",
    ]


def test_no_command_prints_help(home: Path, capsys) -> None:
    diag = _load_diag("companion_diag_help_module")

    diag.main([])

    assert "Companion MCP diagnostics" in capsys.readouterr().out
