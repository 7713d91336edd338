# -*- coding: utf-8 -*-
"""Buyer activity tracking schemas."""
from marshmallow import fields, validate, EXCLUDE

from src.schemas import BaseSchema, not_blank
from src.services.activity_service import EVENT_TYPES

ACTIVITY_REQUIRED_MESSAGE = "Buyer ID and at least one event are required"


class ActivityEventSchema(BaseSchema):
    class Meta:
        unknown = EXCLUDE

    event_type = fields.Str(required=True, validate=validate.OneOf(EVENT_TYPES), data_key='eventType')
    event_data = fields.Dict(load_default=dict, allow_none=True, data_key='eventData')
    page = fields.Str(load_default=None, allow_none=True)
    timestamp = fields.DateTime(load_default=None, allow_none=True)
    ip_address = fields.Str(load_default=None, allow_none=True, data_key='ipAddress')
    user_agent = fields.Str(load_default=None, allow_none=True, data_key='userAgent')


class RecordActivitySchema(BaseSchema):
    """Schema for POST /buyer/activity."""
    class Meta:
        unknown = EXCLUDE

    buyer_id = fields.Str(required=True, validate=not_blank, data_key='buyerId')
    events = fields.List(fields.Nested(ActivityEventSchema), required=True, validate=validate.Length(min=1))
