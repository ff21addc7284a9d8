# data.py
# Local JSON persistence helpers for bills, budgets, notifications and settings

import json
from typing import Any, Dict, List
from pathlib import Path

from config import (
    BILLS_FILE, BUDGETS_FILE, SETTINGS_FILE,
    EMPTY_BILLS, EMPTY_BUDGETS, EMPTY_NOTIFICATIONS, DEFAULT_SETTINGS,
)

def _ensure_dir(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)

def _read_json(path: Path, default):
    _ensure_dir(path)
    if not path.exists():
        return json.loads(json.dumps(default))
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return json.loads(json.dumps(default))

def _write_json(path: Path, obj):
    _ensure_dir(path)
    tmp = path.with_suffix(".tmp")
    with open(tmp, "w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
    tmp.replace(path)

def load_bills(path: Path = BILLS_FILE) -> List[Dict[str, Any]]:
    return _read_json(path, EMPTY_BILLS)

def save_bills(items: List[Dict[str, Any]], path: Path = BILLS_FILE) -> None:
    _write_json(path, items)

def load_budgets(path: Path = BUDGETS_FILE) -> List[Dict[str, Any]]:
    return _read_json(path, EMPTY_BUDGETS)

def save_budgets(items: List[Dict[str, Any]], path: Path = BUDGETS_FILE) -> None:
    _write_json(path, items)

def load_notifications(path: Path) -> List[Dict[str, Any]]:
    return _read_json(path, EMPTY_NOTIFICATIONS)

def save_notifications(items: List[Dict[str, Any]], path: Path) -> None:
    _write_json(path, items)

def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    settings = dict(DEFAULT_SETTINGS)
    settings.update(_read_json(path, DEFAULT_SETTINGS))
    return settings

def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    _write_json(path, settings)
