"""
LessonBook Backend — Document Codec
=====================================

What:  Converts between the wire formats of the API and MongoDB's native types.
How:   `parse_object_id` turns a URL path segment into a `bson.ObjectId`
       (failing closed with ValidationError); `serialize_document` turns a
       stored document into plain JSON-compatible values.
"""

from datetime import datetime
from typing import Any, Dict

from bson import ObjectId
from bson.errors import InvalidId

from lessonbook.exceptions import ValidationError


def parse_object_id(value: str) -> ObjectId:
    """
    Parse a wire identifier into an ObjectId.

    Only the 24-character hex form is accepted. `ObjectId()` also takes raw
    12-byte values, which are never valid on the wire.

    Raises:
        ValidationError: `value` is not a valid identifier encoding (→ 400)
    """
    if not isinstance(value, str) or len(value) != 24:
        raise ValidationError(
            message=f'Invalid document id "{value}".',
            field="id",
        )
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(
            message=f'Invalid document id "{value}".',
            field="id",
        )


def _to_json_value(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json_value(v) for v in value]
    return value


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert a stored document into a JSON-safe dict.

    `_id` keeps its key and becomes its hex string; nested ObjectIds and
    datetimes are converted the same way.
    """
    return {k: _to_json_value(v) for k, v in doc.items()}
