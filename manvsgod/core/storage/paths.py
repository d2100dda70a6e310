# manvsgod/core/storage/paths.py
from __future__ import annotations
from pathlib import Path

# Local data lives under ~/.manvsgod (Windows too)
# decisions: fallback decision log when the spreadsheet is unavailable
ALLOWED_COMPONENTS = {"decisions"}

def manvsgod_home() -> Path:
    return Path.home() / ".manvsgod"

def store_root() -> Path:
    return manvsgod_home() / "store"

def component_db_dir(component: str) -> Path:
    if component not in ALLOWED_COMPONENTS:
        raise ValueError(f"Unknown component: {component}. Allowed: {ALLOWED_COMPONENTS}")
    return store_root() / component

def component_db_path(component: str) -> Path:
    """Database file path for a component (the only allowed location)"""
    return component_db_dir(component) / "db.sqlite"
