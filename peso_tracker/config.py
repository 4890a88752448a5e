# peso_tracker/config.py
from __future__ import annotations

import copy
from pathlib import Path
from typing import Dict

import yaml

DEFAULT_CONFIG: Dict[str, object] = {
    "output_modules": {
        "csv": "peso_tracker.outputs.csv_output.CSVOutput",
        "excel": "peso_tracker.outputs.excel_output.ExcelOutput",
    },
    "output_dir": "data",
    "state_file": "pesoAppData.json",
    "period_policy": "paydate",
    "currency_symbol": "$",
}


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = copy.deepcopy(value)
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | Path | None = None) -> Dict[str, object]:
    """Load a YAML config file, filling in defaults for anything it omits."""
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping.")
    return _merge_defaults(data, DEFAULT_CONFIG)
