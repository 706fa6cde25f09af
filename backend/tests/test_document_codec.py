"""
LessonBook Backend — Document Codec Unit Tests
================================================

What:  Tests for id parsing and document serialization.
"""

from datetime import datetime, timezone

import pytest
from bson import ObjectId

from lessonbook.exceptions import ValidationError
from lessonbook.services.document_codec import parse_object_id, serialize_document


class TestParseObjectId:

    def test_valid_hex_id(self):
        oid = ObjectId()
        assert parse_object_id(str(oid)) == oid

    def test_uppercase_hex_accepted(self):
        oid = ObjectId()
        assert parse_object_id(str(oid).upper()) == oid

    @pytest.mark.parametrize(
        "value",
        [
            "",
            "123",
            "limited",
            "g" * 24,
            "0" * 23,
            "0" * 25,
            "abcdefghijkl",  # 12 chars: a raw-bytes ObjectId, never valid on the wire
        ],
    )
    def test_malformed_ids_rejected(self, value):
        with pytest.raises(ValidationError, match="Invalid document id"):
            parse_object_id(value)

    def test_error_names_field(self):
        with pytest.raises(ValidationError) as excinfo:
            parse_object_id("nope")
        assert excinfo.value.field == "id"


class TestSerializeDocument:

    def test_id_rendered_as_hex(self):
        oid = ObjectId()
        assert serialize_document({"_id": oid, "subject": "Math"}) == {
            "_id": str(oid),
            "subject": "Math",
        }

    def test_nested_values_converted(self):
        oid = ObjectId()
        when = datetime(2024, 5, 2, 10, 15, tzinfo=timezone.utc)
        doc = {
            "lessons": [{"id": oid, "quantity": 2}],
            "meta": {"placed_at": when, "ref": oid},
            "tags": ("a", "b"),
        }

        assert serialize_document(doc) == {
            "lessons": [{"id": str(oid), "quantity": 2}],
            "meta": {"placed_at": "2024-05-02T10:15:00+00:00", "ref": str(oid)},
            "tags": ["a", "b"],
        }

    def test_plain_json_values_untouched(self):
        doc = {"price": 9.5, "spaces": 0, "open": True, "note": None}
        assert serialize_document(doc) == doc
