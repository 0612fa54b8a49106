"""Data models for session worktree tracking."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WorktreeMapping(BaseModel):
    """Associates one agent session with the git worktree it runs in."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    session_id: str = Field(..., alias="sessionId", description="Agent session identifier.")
    repo_root: str = Field(
        ..., alias="repoRoot", description="Repository the worktree was created from."
    )
    branch: str = Field(..., description="Branch checked out in the worktree.")
    worktree_path: str = Field(
        ..., alias="worktreePath", description="Filesystem path of the worktree."
    )
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds.")

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["WorktreeMapping"]
