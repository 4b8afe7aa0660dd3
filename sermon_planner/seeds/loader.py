"""Sample data loader.

Reads sample_data.yaml once per process and checks its shape: every key
other than ``version`` must name a known table and hold a list of rows.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from sermon_planner.schema.verify import REQUIRED_TABLES

_SAMPLE_DATA_PATH = Path(__file__).parent / "sample_data.yaml"


def _validate_sample_data(data: dict[str, Any]) -> None:
    unknown = sorted(k for k in data if k != "version" and k not in REQUIRED_TABLES)
    if unknown:
        raise ValueError(f"Sample data names unknown tables: {unknown}")
    for table in REQUIRED_TABLES:
        rows = data.get(table, [])
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValueError(f"Sample data for {table} must be a list of mappings")


@lru_cache(maxsize=1)
def load_sample_data(path: Path | None = None) -> dict[str, Any]:
    """Load and return the sample dataset.

    Raises:
        FileNotFoundError: If the YAML file is missing.
        ValueError: If the YAML is malformed or names unknown tables.
    """
    source = path or _SAMPLE_DATA_PATH
    try:
        with source.open() as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Sample data YAML is malformed: {exc}") from exc
    _validate_sample_data(data)
    return data
