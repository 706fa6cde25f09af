"""
LessonBook Backend — Domain Validators
========================================

What:  Shape checks that run before any write reaches the store.
How:   Every body must be a non-empty JSON object without a client-chosen
       `_id`. Lesson and order bodies are then run through their Pydantic
       models (schemas/documents.py). Failures raise ValidationError (→ 400).

Per-collection registry:
    The generic /collections routes look up CREATE_VALIDATORS and
    UPDATE_VALIDATORS by collection name, so writes to `lessons` and
    `orders` are checked the same way whichever route they arrive on.
"""

import logging
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from lessonbook.exceptions import ValidationError
from lessonbook.schemas.documents import AddressOrder, LessonFields, OrderFields, SpacesOrder

logger = logging.getLogger(__name__)

Validator = Callable[[Dict[str, Any]], Dict[str, Any]]


def require_document_body(payload: Any) -> Dict[str, Any]:
    """
    Reject anything but a non-empty JSON object.

    Identifiers are assigned by the store and immutable afterwards, so a
    body carrying `_id` is rejected as well. Empty and `$`-prefixed field
    names are refused by the store, so they are rejected here with a 400.
    """
    if not isinstance(payload, dict) or not payload:
        raise ValidationError(message="Request body must be a non-empty JSON object.", field="body")
    if "_id" in payload:
        raise ValidationError(message='Field "_id" cannot be set by the client.', field="_id")
    bad_key = _find_invalid_key(payload)
    if bad_key is not None:
        raise ValidationError(
            message=f'Invalid field name "{bad_key}": names must be non-empty and not start with "$".',
            field=bad_key,
        )
    return payload


def _find_invalid_key(value: Any) -> Optional[str]:
    """First field name MongoDB would refuse to store, searching nested objects too."""
    if isinstance(value, dict):
        for key, item in value.items():
            if not key or key.startswith("$"):
                return key
            found = _find_invalid_key(item)
            if found is not None:
                return found
    elif isinstance(value, list):
        for item in value:
            found = _find_invalid_key(item)
            if found is not None:
                return found
    return None


def validate_lesson(payload: Any) -> Dict[str, Any]:
    """
    Lesson create or partial update.

    Only supplied fields are checked. The payload is returned as sent so
    JSON number types are stored unchanged.
    """
    payload = require_document_body(payload)
    try:
        LessonFields.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning("Rejected lesson payload: %r (%d errors)", payload, e.error_count())
        raise ValidationError(
            message="Invalid lesson format.",
            context={"errors": e.errors(include_input=False, include_url=False)},
        )
    return payload


def validate_order(payload: Any) -> Dict[str, Any]:
    """
    Order create or full replace.

    The sub-kind is picked by its lesson selection key: `lessonIDs` for a
    spaces order, `lessons` for an address order. The rejected payload is
    logged, never echoed back.
    """
    payload = require_document_body(payload)
    if "lessonIDs" in payload:
        model = SpacesOrder
    elif "lessons" in payload:
        model = AddressOrder
    else:
        logger.warning("Rejected order payload (no lesson selection): %r", payload)
        raise ValidationError(message="Invalid order format.", field="lessonIDs")

    try:
        model.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning("Rejected order payload: %r (%d errors)", payload, e.error_count())
        raise ValidationError(
            message="Invalid order format.",
            context={"errors": e.errors(include_input=False, include_url=False)},
        )
    return payload


def validate_order_update(payload: Any) -> Dict[str, Any]:
    """Partial order update on the generic routes: supplied fields only."""
    payload = require_document_body(payload)
    try:
        OrderFields.model_validate(payload)
    except PydanticValidationError as e:
        logger.warning("Rejected order update: %r (%d errors)", payload, e.error_count())
        raise ValidationError(
            message="Invalid order format.",
            context={"errors": e.errors(include_input=False, include_url=False)},
        )
    return payload


# ── Registry for the generic collection routes ────────────────────────────
CREATE_VALIDATORS: Dict[str, Validator] = {
    "lessons": validate_lesson,
    "orders": validate_order,
}

UPDATE_VALIDATORS: Dict[str, Validator] = {
    "lessons": validate_lesson,
    "orders": validate_order_update,
}


def validator_for_create(collection_name: str) -> Validator:
    return CREATE_VALIDATORS.get(collection_name, require_document_body)


def validator_for_update(collection_name: str) -> Validator:
    return UPDATE_VALIDATORS.get(collection_name, require_document_body)
