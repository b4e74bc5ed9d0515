# File: conftest.py
# Directory: tests
# Purpose: Shared fixtures: in-memory Firestore and Storage fakes, temp data dirs.
#
# Notes:
# - FakeFirestore mirrors the slice of google.cloud.firestore.Client we use:
#   collection().document(), batch(), WriteBatch.set()/commit().
# - FakeBucket mirrors bucket.blob() + Blob.upload_from_filename(predefined_acl=...).

import json

import pytest


# --- Fake Firestore ---------------------------------------------------------------------------

class FakeDocRef:
    def __init__(self, collection: str, doc_id: str):
        self.collection = collection
        self.id = doc_id

    @property
    def path(self):
        return f"{self.collection}/{self.id}"


class FakeCollection:
    def __init__(self, name: str):
        self.name = name

    def document(self, doc_id: str):
        return FakeDocRef(self.name, doc_id)


class FakeBatch:
    def __init__(self, db):
        self._db = db
        self.ops = []

    def set(self, ref, data):
        self.ops.append((ref.path, data))

    def commit(self):
        if self._db.fail_on_commit:
            raise RuntimeError("commit rejected")
        self._db.commits.append(list(self.ops))
        for path, data in self.ops:
            self._db.docs[path] = data


class FakeFirestore:
    def __init__(self):
        self.commits = []
        self.docs = {}
        self.fail_on_commit = False

    def collection(self, name: str):
        return FakeCollection(name)

    def batch(self):
        return FakeBatch(self)

    def docs_in(self, collection: str):
        prefix = collection + "/"
        return {p[len(prefix):]: d for p, d in self.docs.items() if p.startswith(prefix)}


# --- Fake Storage -----------------------------------------------------------------------------

class FakeBlob:
    def __init__(self, bucket, name: str):
        self._bucket = bucket
        self.name = name
        self.cache_control = None
        self.public = False

    def upload_from_filename(self, filename, predefined_acl=None):
        if self._bucket.fail_on_upload:
            raise RuntimeError("upload rejected")
        self._bucket.uploads[self.name] = {
            "filename": filename,
            "cache_control": self.cache_control,
            "predefined_acl": predefined_acl,
        }
        if predefined_acl == "publicRead":
            self.public = True
            self._bucket.public.add(self.name)

    @property
    def public_url(self):
        return f"https://storage.googleapis.com/{self._bucket.name}/{self.name}"


class FakeBucket:
    def __init__(self, name: str = "test-bucket"):
        self.name = name
        self.uploads = {}
        self.public = set()
        self.fail_on_upload = False

    def blob(self, name: str):
        return FakeBlob(self, name)


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def fake_bucket():
    return FakeBucket()


@pytest.fixture
def write_json():
    """Write ``data`` as JSON to ``path``, creating parent dirs."""
    def _write(path, data):
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
