"""Companion MCP diagnostics CLI."""

from __future__ import annotations

import argparse
import json

from companion_mcp.config import CompanionSettings, resolve_home
from companion_mcp.envs import EnvironmentStore
from companion_mcp.worktrees import WorktreeTracker


def load_tracker(settings: CompanionSettings) -> WorktreeTracker:
    return WorktreeTracker(resolve_home(settings.companion_home))


def load_envs(settings: CompanionSettings) -> EnvironmentStore:
    return EnvironmentStore(resolve_home(settings.companion_home))


def cmd_envs(args: argparse.Namespace) -> None:
    settings = CompanionSettings()
    store = load_envs(settings)
    profiles = store.list_envs()
    if args.json:
        print(json.dumps([profile.to_json() for profile in profiles], indent=2))
    else:
        for profile in profiles:
            print(f"{profile.slug} [{profile.name}] -> {len(profile.variables)} variables")


def cmd_worktrees(args: argparse.Namespace) -> None:
    settings = CompanionSettings()
    tracker = load_tracker(settings)
    if args.worktree:
        mappings = tracker.get_sessions_for_worktree(args.worktree)
    elif args.repo:
        mappings = tracker.get_sessions_for_repo(args.repo)
    else:
        mappings = tracker.list_mappings()

    if args.json:
        print(json.dumps([mapping.to_json() for mapping in mappings], indent=2))
    else:
        for mapping in mappings:
            shared = tracker.is_worktree_in_use(mapping.worktree_path, mapping.session_id)
            marker = " (shared)" if shared else ""
            print(f"{mapping.session_id} [{mapping.branch}] -> {mapping.worktree_path}{marker}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Companion MCP diagnostics")
    sub = parser.add_subparsers(dest="cmd")

    p_envs = sub.add_parser("envs", help="List environment profiles")
    p_envs.add_argument("--json", action="store_true", help="Output JSON")
    p_envs.set_defaults(func=cmd_envs)

    p_worktrees = sub.add_parser("worktrees", help="List session worktree mappings")
    p_worktrees.add_argument("--repo", help="Only show sessions for this repository root")
    p_worktrees.add_argument("--worktree", help="Only show sessions using this worktree path")
    p_worktrees.add_argument("--json", action="store_true", help="Output JSON")
    p_worktrees.set_defaults(func=cmd_worktrees)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    args.func(args)


if __name__ == "__main__":
    main()
