"""Pytest configuration ensuring project root is importable.

Adds repository root and src/ to sys.path explicitly to avoid
interpreter/path quirks when running without an editable install.
"""
from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def _isolate_config_env():  # noqa: D401
    """Ensure global config/env side effects do not leak between tests.

    - Clear aggregated config cache between tests
    - Restore GANTRY_CONFIG_DIR to original value
    """
    from gantry.config import clear_config_cache  # local import

    prev = os.environ.get("GANTRY_CONFIG_DIR")
    clear_config_cache()
    try:
        yield
    finally:
        clear_config_cache()
        if prev is None:
            os.environ.pop("GANTRY_CONFIG_DIR", None)
        else:
            os.environ["GANTRY_CONFIG_DIR"] = prev


@pytest.fixture
def context():
    from gantry.config import AggregatedConfig
    from gantry.context import ProcessContext

    ctx = ProcessContext.create(AggregatedConfig())
    yield ctx
    ctx.close()
