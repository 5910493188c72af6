"""Pytest configuration for phased testing.

Tests are organized by phase:
- f1: data layer (database, repositories, answer ordering)
- f2: HTTP API routes
- f3: config, event streaming and CLI

Tests in a tests/fN directory with N > CURRENT_PHASE are skipped.
"""

import re
from pathlib import Path

import pytest

CURRENT_PHASE = 3

PHASE_DIR = re.compile(r"^f(\d+)$")


def _phase_of(path: Path) -> int | None:
    for part in path.parts:
        match = PHASE_DIR.match(part)
        if match:
            return int(match.group(1))
    return None


def pytest_collection_modifyitems(config, items):
    """Skip tests of phases past CURRENT_PHASE."""
    for item in items:
        phase = _phase_of(Path(str(item.fspath)))
        if phase is not None and phase > CURRENT_PHASE:
            item.add_marker(
                pytest.mark.skip(reason=f"phase F{phase} is past F{CURRENT_PHASE}")
            )
