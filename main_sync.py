#!/usr/bin/env python3
"""Main Firestore data sync.

Run from the data directory root, for example:

    python main_sync.py

This will:
  1. Read the service account from FIREBASE_SERVICE_ACCOUNT_KEY (or .env).
  2. Upload top-level ``*.json`` files as collections.
  3. Upload the per-document folders (items, quests, hideout, map-events).

An optional YAML config is taken from ``SYNC_CONFIG`` or, when present,
``configs/sync.yaml``; otherwise the defaults in ``sync.firestore_sync`` apply.
Exits with status 1 on the first error.
"""
from __future__ import annotations

from pathlib import Path
import os
import sys
from typing import Optional

from dotenv import load_dotenv


# Resolve project root and load environment variables from .env before
# importing any modules that read FIREBASE_*.
ROOT = Path(__file__).resolve().parent
load_dotenv(dotenv_path=ROOT / ".env")

# Ensure project root is on sys.path so that local packages are importable
# when this file is executed as a script.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db import firebase_app
from sync import firestore_sync


def resolve_config_path() -> Optional[str]:
    env_path = os.getenv("SYNC_CONFIG")
    if env_path:
        return env_path
    default_cfg = Path.cwd() / "configs" / "sync.yaml"
    return str(default_cfg) if default_cfg.exists() else None


def run_sync() -> None:
    app = firebase_app.init_app()
    db = firebase_app.get_firestore(app)
    firestore_sync.run(db, resolve_config_path())
    print("[main_sync] Firestore sync completed successfully.")


def main() -> None:
    try:
        run_sync()
    except Exception as e:
        print(f"[main_sync] Sync failed: {e!r}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
