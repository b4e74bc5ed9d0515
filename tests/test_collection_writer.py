# File: test_collection_writer.py
# Directory: tests
# Purpose: Batched Firestore writes: id selection, skips, 450-op chunking, format errors.

import pytest

from db import collection_writer
from db.collection_writer import (
    MAX_BATCH_OPS,
    BatchedWriter,
    UnsupportedFormatError,
    upload_collection,
)


def test_array_payload_uses_id_field_then_index(fake_db):
    data = [{"id": "alpha", "v": 1}, {"v": 2}, {"id": 7, "v": 3}, {"id": "", "v": 4}]
    written = upload_collection(fake_db, "items", data)

    assert written == 4
    assert set(fake_db.docs_in("items")) == {"alpha", "1", "7", "3"}


def test_whitespace_id_falls_back_to_index(fake_db):
    upload_collection(fake_db, "c", [{"id": "a", "v": 0}, {"id": "   ", "v": 1}, {"id": "\t\n", "v": 2}])

    assert fake_db.docs_in("c") == {
        "a": {"id": "a", "v": 0},
        "1": {"id": "   ", "v": 1},
        "2": {"id": "\t\n", "v": 2},
    }


def test_boolean_and_float_ids_use_json_spelling(fake_db):
    upload_collection(fake_db, "flags", [{"id": True, "v": 1}, {"id": 2.0, "v": 1}])
    assert set(fake_db.docs_in("flags")) == {"true", "2"}


def test_array_payload_skips_non_objects(fake_db):
    written = upload_collection(fake_db, "mixed", [1, "x", None, [1], {"a": 1}])

    assert written == 1
    assert fake_db.docs_in("mixed") == {"4": {"a": 1}}


def test_record_with_empty_nested_object_is_written(fake_db):
    upload_collection(fake_db, "c", [{"id": "z", "a": {}}])
    assert fake_db.docs_in("c") == {"z": {"id": "z", "a": {}}}


def test_empty_record_is_skipped_without_commit(fake_db):
    written = upload_collection(fake_db, "c", {"z": {}})

    assert written == 0
    assert fake_db.commits == []


def test_record_that_sanitizes_to_empty_is_skipped(fake_db):
    upload_collection(fake_db, "c", {"blank": {"": 1, "  ": 2}, "ok": {"a": 1}})
    assert fake_db.docs_in("c") == {"ok": {"a": 1}}


def test_map_payload_skips_non_object_values_without_sanitizing(fake_db, monkeypatch):
    seen = []
    real_sanitize = collection_writer.sanitize

    def spy(value):
        seen.append(value)
        return real_sanitize(value)

    monkeypatch.setattr(collection_writer, "sanitize", spy)
    upload_collection(fake_db, "c", {"a": 1, "b": {"x": 1}})

    assert fake_db.docs_in("c") == {"b": {"x": 1}}
    assert seen == [{"x": 1}]


def test_map_payload_skips_blank_keys(fake_db):
    upload_collection(fake_db, "c", {"": {"x": 1}, "   ": {"x": 2}, "k": {"x": 3}})
    assert fake_db.docs_in("c") == {"k": {"x": 3}}


def test_451_records_commit_in_two_batches(fake_db):
    data = [{"id": f"doc-{i}", "n": i} for i in range(451)]
    written = upload_collection(fake_db, "big", data)

    assert written == 451
    assert [len(ops) for ops in fake_db.commits] == [450, 1]


def test_exact_multiple_does_not_commit_an_empty_batch(fake_db):
    data = [{"n": i} for i in range(MAX_BATCH_OPS * 2)]
    upload_collection(fake_db, "even", data)

    assert [len(ops) for ops in fake_db.commits] == [450, 450]


def test_custom_batch_limit(fake_db):
    upload_collection(fake_db, "small", [{"n": i} for i in range(5)], batch_limit=2)
    assert [len(ops) for ops in fake_db.commits] == [2, 2, 1]


@pytest.mark.parametrize("limit", [0, 501, -1])
def test_batch_limit_out_of_range(fake_db, limit):
    with pytest.raises(ValueError):
        BatchedWriter(fake_db, "c", batch_limit=limit)


@pytest.mark.parametrize("payload", ["just text", 42, 3.5, True, None])
def test_unsupported_payload_raises_and_writes_nothing(fake_db, payload):
    with pytest.raises(UnsupportedFormatError) as exc:
        upload_collection(fake_db, "weird", payload)

    assert exc.value.collection_name == "weird"
    assert "weird" in str(exc.value)
    assert fake_db.commits == []


def test_empty_flush_is_noop(fake_db):
    writer = BatchedWriter(fake_db, "c")
    writer.flush()
    assert fake_db.commits == []
    assert writer.commits == 0


def test_commit_failure_propagates(fake_db):
    fake_db.fail_on_commit = True
    with pytest.raises(RuntimeError, match="commit rejected"):
        upload_collection(fake_db, "c", [{"a": 1}])


def test_written_documents_are_sanitized(fake_db):
    upload_collection(fake_db, "c", {"k": {"": 1, "list": [{}, 2]}})
    assert fake_db.docs_in("c") == {"k": {"list": [2]}}


def test_upload_logs_collection_name(fake_db, capsys):
    upload_collection(fake_db, "quests", {"q1": {"name": "Q"}})
    assert "[collection_writer] Uploaded: quests (1 docs)\n" in capsys.readouterr().out
