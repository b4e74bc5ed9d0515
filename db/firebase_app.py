"""Firebase Admin bootstrap shared by the sync and upload scripts.

Configuration is taken from environment variables:
  - FIREBASE_SERVICE_ACCOUNT_KEY (required): the service account JSON document
    itself, not a path to it.
  - FIREBASE_STORAGE_BUCKET (default: "arc-raiders-wiki.firebasestorage.app")

This module exposes ``load_service_account()`` for reading the credential and
``init_app()`` for building a Firebase app. Callers get the Firestore client
and the Storage bucket from that app and pass them on explicitly.
"""
from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import credentials, firestore, storage
from dotenv import load_dotenv

load_dotenv()


SERVICE_ACCOUNT_ENV = "FIREBASE_SERVICE_ACCOUNT_KEY"
STORAGE_BUCKET_ENV = "FIREBASE_STORAGE_BUCKET"
DEFAULT_STORAGE_BUCKET = "arc-raiders-wiki.firebasestorage.app"
DEFAULT_APP_NAME = "[DEFAULT]"


def load_service_account(env: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """Parse the service account JSON held in ``FIREBASE_SERVICE_ACCOUNT_KEY``.

    Raises ``ValueError`` when the variable is unset, empty, or not a JSON
    object.
    """
    env = os.environ if env is None else env
    raw = env.get(SERVICE_ACCOUNT_ENV)
    if not raw:
        raise ValueError(f"{SERVICE_ACCOUNT_ENV} not found")

    try:
        info = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"{SERVICE_ACCOUNT_ENV} is not valid JSON: {e}") from e

    if not isinstance(info, dict):
        raise ValueError(f"{SERVICE_ACCOUNT_ENV} must hold a JSON object")
    return info


def storage_bucket_name(env: Optional[Dict[str, str]] = None) -> str:
    env = os.environ if env is None else env
    return env.get(STORAGE_BUCKET_ENV) or DEFAULT_STORAGE_BUCKET


def init_app(with_storage: bool = False, name: str = DEFAULT_APP_NAME):
    """Create the Firebase app for this run.

    A second call with the same ``name`` returns the existing app.
    """
    try:
        return firebase_admin.get_app(name)
    except ValueError:
        pass

    cred = credentials.Certificate(load_service_account())
    options: Dict[str, Any] = {}
    if with_storage:
        options["storageBucket"] = storage_bucket_name()
    return firebase_admin.initialize_app(cred, options or None, name=name)


def get_firestore(app):
    """Return the Firestore client bound to ``app``."""
    return firestore.client(app=app)


def get_bucket(app):
    """Return the default Storage bucket bound to ``app``."""
    return storage.bucket(app=app)
