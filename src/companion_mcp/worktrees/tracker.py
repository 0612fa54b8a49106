"""Persistent session to worktree tracking."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from ..config import resolve_home
from ..files import write_json
from .models import WorktreeMapping

logger = logging.getLogger(__name__)

TRACKER_FILENAME = "worktrees.json"


class WorktreeTracker:
    """Track which session is using which git worktree.

    All mappings live in a single ``worktrees.json`` file under the config
    root. The file is read once at construction and rewritten in full after
    every mutation. A missing or unreadable file yields an empty tracker.

    The tracker does no locking; concurrent mutations must be serialized by
    the caller, and two processes sharing one config root may overwrite each
    other's changes.
    """

    def __init__(self, root: Path | str | None = None) -> None:
        self._path = resolve_home(root) / TRACKER_FILENAME
        self._mappings: list[WorktreeMapping] = self._load()

    @property
    def path(self) -> Path:
        """Return the file backing this tracker."""

        return self._path

    def _load(self) -> list[WorktreeMapping]:
        if not self._path.exists():
            return []

        try:
            document = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "Ignoring unreadable worktree tracker file",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return []

        if not isinstance(document, list):
            logger.warning(
                "Ignoring worktree tracker file with non-array payload",
                extra={"path": str(self._path)},
            )
            return []

        mappings: list[WorktreeMapping] = []
        for index, entry in enumerate(document):
            try:
                mappings.append(WorktreeMapping.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "Skipping invalid worktree mapping",
                    extra={"path": str(self._path), "index": index, "error": str(exc)},
                )
        return mappings

    def _save(self, mappings: list[WorktreeMapping]) -> None:
        write_json(self._path, [mapping.to_json() for mapping in mappings])
        self._mappings = mappings

    def list_mappings(self) -> list[WorktreeMapping]:
        """Return every mapping in storage order."""

        return list(self._mappings)

    def add_mapping(self, mapping: WorktreeMapping) -> None:
        """Record ``mapping``, replacing any existing mapping for the same session."""

        mappings = [m for m in self._mappings if m.session_id != mapping.session_id]
        replaced = len(mappings) != len(self._mappings)
        mappings.append(mapping)
        self._save(mappings)
        logger.debug(
            "Tracked worktree for session",
            extra={
                "session_id": mapping.session_id,
                "worktree_path": mapping.worktree_path,
                "replaced": replaced,
            },
        )

    def remove_by_session(self, session_id: str) -> WorktreeMapping | None:
        """Remove and return the mapping for ``session_id``, or ``None`` if absent."""

        removed = self.get_by_session(session_id)
        if removed is None:
            return None
        self._save([m for m in self._mappings if m.session_id != session_id])
        logger.debug(
            "Released worktree for session",
            extra={"session_id": session_id, "worktree_path": removed.worktree_path},
        )
        return removed

    def get_by_session(self, session_id: str) -> WorktreeMapping | None:
        for mapping in self._mappings:
            if mapping.session_id == session_id:
                return mapping
        return None

    def get_sessions_for_worktree(self, worktree_path: str) -> list[WorktreeMapping]:
        return [m for m in self._mappings if m.worktree_path == worktree_path]

    def get_sessions_for_repo(self, repo_root: str) -> list[WorktreeMapping]:
        return [m for m in self._mappings if m.repo_root == repo_root]

    def is_worktree_in_use(self, worktree_path: str, exclude_session_id: str | None = None) -> bool:
        """Return whether any session other than ``exclude_session_id`` uses the worktree."""

        return any(
            m.worktree_path == worktree_path and m.session_id != exclude_session_id
            for m in self._mappings
        )


__all__ = ["TRACKER_FILENAME", "WorktreeTracker"]
