"""Environment profile model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class EnvironmentProfile(BaseModel):
    """A named set of environment variables applied to agent sessions."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display name as entered by the user, trimmed.")
    slug: str = Field(..., description="Normalized identifier used as the file name.")
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Variable names mapped to their values.",
    )
    created_at: int = Field(..., alias="createdAt", description="Epoch milliseconds.")
    updated_at: int = Field(..., alias="updatedAt", description="Epoch milliseconds.")

    @field_validator("variables", mode="before")
    @classmethod
    def _ensure_mapping(cls, value: Any):
        if value is None:
            return {}
        return value

    @model_validator(mode="after")
    def _check_timestamps(self) -> "EnvironmentProfile":
        if self.updated_at < self.created_at:
            raise ValueError("updatedAt must not precede createdAt")
        return self

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


__all__ = ["EnvironmentProfile"]
