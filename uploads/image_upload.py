"""Recursive image uploader for Firebase Storage.

Walk the local ``images/`` tree and upload every image file to the Storage
bucket under the same relative path, e.g. ``images/sub/pic.PNG`` is stored as
``images/sub/pic.PNG``. Uploaded objects get a long-lived public cache header
and are made publicly readable.

This module exposes ``upload_images(store, cfg)`` and a ``run(bucket,
config_path)`` entrypoint so it can be driven from ``main_upload_images.py``.
The optional YAML config can override defaults such as the image root, the
remote prefix and the accepted extensions.
"""
from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import yaml

from object_store.client import DEFAULT_CACHE_CONTROL, AssetStore
from object_store.client import from_config as store_from_config


DEFAULT_IMAGE_EXTENSIONS = ("png", "jpg", "jpeg", "webp", "gif")


# ---------- CONFIG MODEL ----------

@dataclass
class ImageUploadConfig:
    images_root: str = "images"
    remote_prefix: str = "images"
    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_IMAGE_EXTENSIONS))
    cache_control: str = DEFAULT_CACHE_CONTROL
    public: bool = True

    @classmethod
    def from_yaml(cls, path: Optional[str]) -> "ImageUploadConfig":
        if not path:
            return cls()
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        cfg = cls()
        # shallow override of known fields
        if "images_root" in raw:
            cfg.images_root = str(raw["images_root"])
        if "remote_prefix" in raw:
            cfg.remote_prefix = str(raw["remote_prefix"])
        if "extensions" in raw and isinstance(raw["extensions"], list):
            cfg.extensions = [str(v).lower().lstrip(".") for v in raw["extensions"]]
        if "cache_control" in raw:
            cfg.cache_control = str(raw["cache_control"])
        if "public" in raw:
            cfg.public = bool(raw["public"])
        return cfg

    def store_config(self) -> dict:
        return {"cache_control": self.cache_control, "public": self.public}


# ---------- helpers ----------

def is_image(file_name: str, extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS) -> bool:
    """Case-insensitive extension check, e.g. ``pic.PNG`` matches ``png``."""
    ext = os.path.splitext(file_name)[1].lower().lstrip(".")
    return bool(ext) and ext in {e.lower() for e in extensions}


def upload_directory(
    store: AssetStore,
    local_dir: Path,
    remote_dir: str,
    extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS,
) -> int:
    """Upload every image below ``local_dir`` to ``remote_dir``; return the count.

    Directories are walked depth-first, one upload at a time. Files that are
    not images are skipped silently.
    """
    extensions = list(extensions)
    uploaded = 0

    with os.scandir(local_dir) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        remote_path = posixpath.join(remote_dir, entry.name)

        # Symlinks are neither walked nor uploaded.
        if entry.is_dir(follow_symlinks=False):
            uploaded += upload_directory(store, Path(entry.path), remote_path, extensions)
        elif entry.is_file(follow_symlinks=False) and is_image(entry.name, extensions):
            store.upload(entry.path, remote_path)
            print(f"[image_upload] Uploaded: {remote_path}")
            uploaded += 1

    return uploaded


def upload_images(store: AssetStore, cfg: Optional[ImageUploadConfig] = None) -> int:
    """Upload the whole image tree. Raises ``FileNotFoundError`` if it is missing."""
    cfg = cfg or ImageUploadConfig()
    images_root = Path(cfg.images_root)

    if not images_root.is_dir():
        raise FileNotFoundError(f"images folder not found: {images_root.resolve()}")

    count = upload_directory(store, images_root, cfg.remote_prefix, cfg.extensions)
    print(f"[image_upload] All images uploaded ({count} files).")
    return count


def run(bucket, config_path: Optional[str] = None) -> int:
    cfg = ImageUploadConfig.from_yaml(config_path)
    store = store_from_config(bucket, cfg.store_config())
    return upload_images(store, cfg)
