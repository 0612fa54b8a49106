"""Small filesystem helpers shared by the registries."""

from __future__ import annotations

import json
import os
import time
from pathlib import Path
from typing import Any


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


def write_json(path: Path, payload: Any) -> None:
    """Write ``payload`` as pretty JSON, replacing ``path`` in one step.

    The parent directory is created on demand. The document is written to a
    sibling temp file first so readers never observe a half-written file.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        tmp_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise


__all__ = ["now_ms", "write_json"]
