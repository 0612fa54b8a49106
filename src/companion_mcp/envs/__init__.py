"""Environment profile storage exports."""

from .models import EnvironmentProfile
from .store import (
    ENVS_DIRNAME,
    EnvCollisionError,
    EnvStoreError,
    EnvValidationError,
    EnvironmentStore,
    slugify,
)
from .utils import build_session_environment

__all__ = [
    "ENVS_DIRNAME",
    "EnvCollisionError",
    "EnvStoreError",
    "EnvValidationError",
    "EnvironmentProfile",
    "EnvironmentStore",
    "build_session_environment",
    "slugify",
]
