"""Session worktree tracking exports."""

from .models import WorktreeMapping
from .tracker import TRACKER_FILENAME, WorktreeTracker

__all__ = ["TRACKER_FILENAME", "WorktreeMapping", "WorktreeTracker"]
