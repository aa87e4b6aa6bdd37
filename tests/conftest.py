# tests/conftest.py
from __future__ import annotations

import os
import random
from pathlib import Path
from typing import Callable

import numpy as np
import pytest

CSV_HEADER = (
    "Employee ID,Date,First,Last,Location,In Time,Out Time,Role,Regular Hours,OT Hours"
)


# -----------------------------
# Global, deterministic seeding
# -----------------------------
@pytest.fixture(autouse=True, scope="session")
def _seed_everything() -> None:
    """
    Make tests deterministic across runs. If you need a different seed in a test,
    override locally.
    """
    seed = int(os.environ.get("PYTEST_SEED", "1234"))
    os.environ["PYTHONHASHSEED"] = str(seed)
    random.seed(seed)
    np.random.seed(seed)


# -----------------------------
# Path helpers
# -----------------------------
@pytest.fixture(scope="session")
def project_root() -> Path:
    """Repository root (where pyproject.toml lives)."""
    return Path(__file__).resolve().parents[1]


# -----------------------------
# CSV builders
# -----------------------------
@pytest.fixture
def shift_row() -> Callable[..., str]:
    """One export line; names default to 'Ana Lopez'."""

    def _row(
        emp: str,
        date: str,
        in_time: str,
        out_time: str,
        first: str = "Ana",
        last: str = "Lopez",
        role: str = "Server",
        location: str = "Main",
    ) -> str:
        return f"{emp},{date},{first},{last},{location},{in_time},{out_time},{role},8,0"

    return _row


@pytest.fixture
def make_csv() -> Callable[..., str]:
    """Join data lines under the standard export header."""

    def _make(*rows: str) -> str:
        return "\n".join([CSV_HEADER, *rows]) + "\n"

    return _make
