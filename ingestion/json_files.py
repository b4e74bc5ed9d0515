"""Read local JSON files that feed the Firestore sync.

Two layouts are supported:
  - root files: ``<root>/<collection>.json`` holds a whole collection;
  - folder files: ``<root>/<folder>/<doc_id>.json`` holds one document of the
    ``<folder>`` collection.

Only immediate children are read; nothing here recurses.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Iterator, Tuple


DEFAULT_EXCLUDE_FILES = ("package.json", "package-lock.json")


class JsonFileError(ValueError):
    """Raised when a JSON file cannot be parsed."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid JSON in {path}: {reason}")
        self.path = path


def load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise JsonFileError(path, str(e)) from e


def _json_files(directory: Path) -> Iterator[Path]:
    for path in sorted(directory.iterdir()):
        if path.suffix == ".json" and path.is_file():
            yield path


def iter_root_collections(
    root: Path,
    exclude: Iterable[str] = DEFAULT_EXCLUDE_FILES,
) -> Iterator[Tuple[str, Any]]:
    """Yield ``(collection_name, content)`` for each ``*.json`` file in ``root``.

    Manifest files listed in ``exclude`` are matched by exact file name.
    """
    excluded = set(exclude)
    for path in _json_files(Path(root)):
        if path.name in excluded:
            continue
        yield path.stem, load_json(path)


def iter_folder_documents(folder: Path) -> Iterator[Tuple[str, Any]]:
    """Yield ``(doc_id, content)`` for each ``*.json`` file in ``folder``.

    Raises ``FileNotFoundError`` if ``folder`` does not exist.
    """
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Folder not found: {folder}")
    for path in _json_files(folder):
        yield path.stem, load_json(path)
