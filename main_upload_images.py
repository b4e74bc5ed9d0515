#!/usr/bin/env python3
"""Upload the local ``images/`` tree to Firebase Storage.

Run from the directory that holds ``images/``, for example:

    python main_upload_images.py

The bucket defaults to ``arc-raiders-wiki.firebasestorage.app`` and can be
changed with FIREBASE_STORAGE_BUCKET. An optional YAML config is taken from
``IMAGE_UPLOAD_CONFIG`` or, when present, ``configs/images.yaml``.
Exits with status 1 on the first error.
"""
from __future__ import annotations

from pathlib import Path
import os
import sys
from typing import Optional

from dotenv import load_dotenv


ROOT = Path(__file__).resolve().parent
load_dotenv(dotenv_path=ROOT / ".env")

# Ensure project root is on sys.path so that local packages (e.g. "uploads")
# are importable when this file is executed as a script.
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from db import firebase_app
from uploads import image_upload


def resolve_config_path() -> Optional[str]:
    env_path = os.getenv("IMAGE_UPLOAD_CONFIG")
    if env_path:
        return env_path
    default_cfg = Path.cwd() / "configs" / "images.yaml"
    return str(default_cfg) if default_cfg.exists() else None


def run_upload() -> None:
    app = firebase_app.init_app(with_storage=True)
    bucket = firebase_app.get_bucket(app)
    image_upload.run(bucket, resolve_config_path())
    print(f"[main_upload_images] All images uploaded to {bucket.name}.")


def main() -> None:
    try:
        run_upload()
    except Exception as e:
        print(f"[main_upload_images] Image upload failed: {e!r}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
