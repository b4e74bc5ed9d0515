"""Object storage client abstraction.

Currently implements a Firebase Storage (Google Cloud Storage) backed client.

Configuration (via dict passed to ``from_config``):
  - cache_control: str (default: "public, max-age=31536000")
  - public: bool (default: True) -- grant public read on every uploaded object
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Union

from google.cloud.storage import Bucket


DEFAULT_CACHE_CONTROL = "public, max-age=31536000"
PUBLIC_READ_ACL = "publicRead"


class AssetStore:
    """Thin wrapper around a ``google.cloud.storage.Bucket``.

    The bucket is built by the caller (see ``db.firebase_app.get_bucket``).
    """

    def __init__(self, bucket: Bucket, config: Dict[str, Any]):
        self._bucket = bucket
        self.cache_control: str = config.get("cache_control", DEFAULT_CACHE_CONTROL)
        self.public: bool = bool(config.get("public", True))

    def upload(self, local_path: Union[str, Path], remote_path: str) -> str:
        """Upload one file to ``remote_path`` and return its public URL (or key).

        The public-read ACL is applied by the upload request itself. Errors from
        the storage API propagate to the caller.
        """
        blob = self._bucket.blob(remote_path)
        blob.cache_control = self.cache_control

        acl: Optional[str] = PUBLIC_READ_ACL if self.public else None
        blob.upload_from_filename(str(local_path), predefined_acl=acl)

        if self.public:
            return blob.public_url
        return remote_path


def from_config(bucket: Bucket, config: Dict[str, Any]) -> AssetStore:
    """Factory used by the rest of the codebase.

    ``config`` is expected to be a flat dict as described in the module docstring.
    """
    return AssetStore(bucket, config)
