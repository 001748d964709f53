"""Locate the ``sdui.toml`` a settings load should read.

The search starts in the working directory and climbs towards the
filesystem root; the first ``sdui.toml`` found wins. ``SDUI_CONFIG``
names a file explicitly and disables the search.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sdui.toml"
CONFIG_ENV_VAR = "SDUI_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``sdui.toml`` at or above *start* (default: cwd).

    When ``SDUI_CONFIG`` is set, that file is returned if it exists and
    None otherwise.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        explicit = Path(override)
        return explicit if explicit.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
