"""Sync local JSON data into Firestore collections.

Usage (from repo root):

    python main_sync.py

Before running, ensure:
  - ``FIREBASE_SERVICE_ACCOUNT_KEY`` holds the service account JSON (a ``.env``
    file in the repo root works too).
  - The working directory contains the data: ``*.json`` files at the top level
    and/or the per-document folders listed in ``SyncConfig.folders``.

This script:
  1. Uploads every top-level ``<name>.json`` (except manifests) as the
     ``<name>`` collection.
  2. Uploads every ``<folder>/<doc>.json`` as document ``<doc>`` of the
     ``<folder>`` collection. Missing folders are skipped with a warning.

Everything runs sequentially; the first error aborts the run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from db.collection_writer import MAX_BATCH_OPS, upload_collection
from ingestion.json_files import (
    DEFAULT_EXCLUDE_FILES,
    iter_folder_documents,
    iter_root_collections,
)


DEFAULT_FOLDERS = ("items", "quests", "hideout", "map-events")


# ---------- CONFIG MODEL ----------

@dataclass
class SyncConfig:
    root_dir: str = "."
    exclude_files: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_FILES))
    folders: List[str] = field(default_factory=lambda: list(DEFAULT_FOLDERS))
    batch_limit: int = MAX_BATCH_OPS

    @classmethod
    def from_yaml(cls, path: Optional[str]) -> "SyncConfig":
        if not path:
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        cfg = cls()
        # shallow override of known fields
        if "root_dir" in raw:
            cfg.root_dir = str(raw["root_dir"])
        if "exclude_files" in raw and isinstance(raw["exclude_files"], list):
            cfg.exclude_files = [str(v) for v in raw["exclude_files"]]
        if "folders" in raw and isinstance(raw["folders"], list):
            cfg.folders = [str(v) for v in raw["folders"]]
        if "batch_limit" in raw:
            cfg.batch_limit = int(raw["batch_limit"])
        return cfg


@dataclass
class SyncSummary:
    collections: Dict[str, int] = field(default_factory=dict)
    missing_folders: List[str] = field(default_factory=list)

    @property
    def documents(self) -> int:
        return sum(self.collections.values())

    def add(self, collection_name: str, written: int) -> None:
        self.collections[collection_name] = self.collections.get(collection_name, 0) + written


# ---------- pipeline steps ----------

def sync_root_files(db, cfg: SyncConfig, summary: Optional[SyncSummary] = None) -> SyncSummary:
    """Upload each top-level JSON file as its own collection."""
    if summary is None:
        summary = SyncSummary()
    root = Path(cfg.root_dir)

    for name, content in iter_root_collections(root, exclude=cfg.exclude_files):
        written = upload_collection(db, name, content, batch_limit=cfg.batch_limit)
        summary.add(name, written)
    return summary


def sync_folder(db, folder: str, cfg: SyncConfig, summary: Optional[SyncSummary] = None) -> SyncSummary:
    """Upload ``<root>/<folder>/*.json`` as documents of the ``folder`` collection."""
    if summary is None:
        summary = SyncSummary()
    folder_path = Path(cfg.root_dir) / folder

    if not folder_path.is_dir():
        print(f"[firestore_sync] WARNING: Folder not found: {folder}")
        summary.missing_folders.append(folder)
        return summary

    for doc_id, content in iter_folder_documents(folder_path):
        written = upload_collection(db, folder, {doc_id: content}, batch_limit=cfg.batch_limit)
        summary.add(folder, written)
    return summary


def sync_data(db, cfg: Optional[SyncConfig] = None) -> SyncSummary:
    """Main sync routine: root files first, then folder collections in order."""
    cfg = cfg or SyncConfig()
    summary = SyncSummary()

    print(f"[firestore_sync] Syncing JSON from {Path(cfg.root_dir).resolve()}...")
    sync_root_files(db, cfg, summary)

    for folder in cfg.folders:
        sync_folder(db, folder, cfg, summary)

    print(
        f"[firestore_sync] Done: {len(summary.collections)} collections, "
        f"{summary.documents} documents."
    )
    return summary


def run(db, config_path: Optional[str] = None) -> SyncSummary:
    return sync_data(db, SyncConfig.from_yaml(config_path))
