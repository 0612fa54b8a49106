"""Helpers for applying environment profiles to agent sessions."""

from __future__ import annotations

import os
from typing import Mapping

from .models import EnvironmentProfile

_SANITIZED_VARS = {
    "PYTHONHOME",
    "PYTHONPATH",
    "VIRTUAL_ENV",
    "PIP_RESPECT_VIRTUALENV",
}


def build_session_environment(
    profile: EnvironmentProfile | None = None,
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return a subprocess environment with the profile's variables applied."""

    env = dict(os.environ if base is None else base)
    for key in _SANITIZED_VARS:
        env.pop(key, None)
    if profile is not None:
        env.update(profile.variables)
    return env
