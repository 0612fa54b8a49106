"""File-backed storage for named environment profiles."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Callable, Mapping

from pydantic import ValidationError

from ..config import resolve_home
from ..files import now_ms, write_json
from .models import EnvironmentProfile

logger = logging.getLogger(__name__)

ENVS_DIRNAME = "envs"

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_CANONICAL_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class EnvStoreError(RuntimeError):
    """Base class for environment profile store errors."""


class EnvValidationError(EnvStoreError, ValueError):
    """Raised when a profile name is malformed."""


class EnvCollisionError(EnvStoreError):
    """Raised when a profile name maps to a slug that is already taken."""

    def __init__(self, slug: str) -> None:
        super().__init__(f'An environment with a similar name already exists ("{slug}")')
        self.slug = slug


def slugify(name: str) -> str:
    """Return the file-safe identifier for a display name.

    >>> slugify("Hello World! @#$%")
    'hello-world'
    """

    return _NON_ALNUM_RUN.sub("-", name.strip().lower()).strip("-")


def _validated_name(name: str) -> tuple[str, str]:
    trimmed = name.strip()
    if not trimmed:
        raise EnvValidationError("Environment name is required")
    slug = slugify(trimmed)
    if not slug:
        raise EnvValidationError("Environment name must contain alphanumeric characters")
    return trimmed, slug


class EnvironmentStore:
    """Manage environment profiles stored as ``<root>/envs/<slug>.json``.

    Nothing is cached between calls; every query reads the profile files
    again. Files that cannot be parsed are treated as absent.
    """

    def __init__(
        self,
        root: Path | str | None = None,
        *,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._dir = resolve_home(root) / ENVS_DIRNAME
        self._clock = clock or now_ms

    @property
    def directory(self) -> Path:
        """Return the directory holding the profile files."""

        return self._dir

    def _path_for(self, slug: str) -> Path | None:
        if not _CANONICAL_SLUG.match(slug):
            return None
        return self._dir / f"{slug}.json"

    def _read(self, path: Path) -> EnvironmentProfile | None:
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "Skipping unreadable environment file",
                extra={"path": str(path), "error": str(exc)},
            )
            return None

        try:
            profile = EnvironmentProfile.model_validate(document)
        except ValidationError as exc:
            logger.warning(
                "Skipping invalid environment file",
                extra={"path": str(path), "error": str(exc)},
            )
            return None

        if profile.slug != path.stem:
            logger.warning(
                "Skipping environment file whose slug does not match its name",
                extra={"path": str(path), "slug": profile.slug},
            )
            return None
        return profile

    def _write(self, profile: EnvironmentProfile) -> None:
        write_json(self._dir / f"{profile.slug}.json", profile.to_json())

    def list_envs(self) -> list[EnvironmentProfile]:
        """Return every readable profile sorted by name."""

        if not self._dir.is_dir():
            return []

        profiles: list[EnvironmentProfile] = []
        for path in sorted(self._dir.glob("*.json")):
            profile = self._read(path)
            if profile is not None:
                profiles.append(profile)
        profiles.sort(key=lambda profile: profile.name)
        return profiles

    def get_env(self, slug: str) -> EnvironmentProfile | None:
        path = self._path_for(slug)
        if path is None:
            return None
        return self._read(path)

    def create_env(
        self,
        name: str,
        variables: Mapping[str, str] | None = None,
    ) -> EnvironmentProfile:
        """Create and persist a new profile.

        Raises:
            EnvValidationError: if the name is blank or has no letters or digits.
            EnvCollisionError: if another profile already uses the derived slug.
        """

        trimmed, slug = _validated_name(name)
        if self.get_env(slug) is not None:
            raise EnvCollisionError(slug)

        timestamp = self._clock()
        profile = EnvironmentProfile(
            name=trimmed,
            slug=slug,
            variables=dict(variables or {}),
            created_at=timestamp,
            updated_at=timestamp,
        )
        self._write(profile)
        logger.info("Created environment profile", extra={"slug": slug})
        return profile

    def update_env(
        self,
        slug: str,
        *,
        name: str | None = None,
        variables: Mapping[str, str] | None = None,
    ) -> EnvironmentProfile | None:
        """Apply a partial update, renaming the file when the slug changes.

        Returns ``None`` when ``slug`` does not name an existing profile.
        """

        existing = self.get_env(slug)
        if existing is None:
            return None

        new_name = existing.name
        new_slug = slug
        if name is not None:
            new_name, new_slug = _validated_name(name)
            if new_slug != slug and self.get_env(new_slug) is not None:
                raise EnvCollisionError(new_slug)

        # updatedAt must move forward even when the clock has not ticked.
        updated = EnvironmentProfile.model_validate(
            {
                **existing.model_dump(),
                "name": new_name,
                "slug": new_slug,
                "variables": dict(variables) if variables is not None else dict(existing.variables),
                "updated_at": max(self._clock(), existing.updated_at + 1),
            }
        )
        self._write(updated)
        if new_slug != slug:
            (self._dir / f"{slug}.json").unlink(missing_ok=True)
            logger.info(
                "Renamed environment profile",
                extra={"old_slug": slug, "slug": new_slug},
            )
        else:
            logger.info("Updated environment profile", extra={"slug": slug})
        return updated

    def delete_env(self, slug: str) -> bool:
        path = self._path_for(slug)
        if path is None or not path.exists():
            return False
        path.unlink()
        logger.info("Deleted environment profile", extra={"slug": slug})
        return True


__all__ = [
    "ENVS_DIRNAME",
    "EnvCollisionError",
    "EnvStoreError",
    "EnvValidationError",
    "EnvironmentStore",
    "slugify",
]
