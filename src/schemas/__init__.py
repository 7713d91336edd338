# -*- coding: utf-8 -*-
"""
Request schemas.

Marshmallow schemas validating JSON bodies before they reach the services.
`load_payload` converts marshmallow errors into the service ValidationError
so every endpoint answers with the same error body.
"""
from marshmallow import Schema, ValidationError as MarshmallowValidationError, pre_load

from src.utils.errors import ValidationError


def not_blank(value):
    """Reject empty and whitespace-only strings."""
    if value is None or not str(value).strip():
        raise MarshmallowValidationError('Field may not be blank.')


class BaseSchema(Schema):
    """Turns '' into None for the keys listed in BLANK_TO_NONE."""

    BLANK_TO_NONE = ()

    @pre_load
    def _blank_to_none(self, data, **kwargs):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in self.BLANK_TO_NONE:
            value = data.get(key)
            if isinstance(value, str) and not value.strip():
                data[key] = None
        return data


def load_payload(schema: Schema, payload, required_message, invalid_message: str = "Invalid request data"):
    """
    Validate payload with schema.

    Raises ValidationError with required_message when any required field is
    missing or blank, otherwise with invalid_message. required_message may be
    a dict keyed by field name for per-field messages. Marshmallow messages
    are attached as `details`.
    """
    try:
        return schema.load(payload if payload is not None else {})
    except MarshmallowValidationError as err:
        messages = err.messages if isinstance(err.messages, dict) else {'_schema': err.messages}
        required_keys = {
            field.data_key or name
            for name, field in schema.fields.items()
            if field.required
        }
        failed_required = [key for key in messages if key in required_keys]
        if not failed_required:
            message = invalid_message
        elif isinstance(required_message, dict):
            message = required_message.get(failed_required[0], invalid_message)
        else:
            message = required_message
        raise ValidationError(message, payload={'details': messages})
