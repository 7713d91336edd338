# -*- coding: utf-8 -*-
"""
Buyer request schemas.

Field names follow the client contract (camelCase) through data_key and load
into snake_case keys for the services.
"""
from marshmallow import fields, validate, EXCLUDE

from src.config.buyers import AREA_IDS, BUYER_TYPE_IDS, SOURCE_CSV_IMPORT
from src.schemas import BaseSchema, not_blank

CREATE_REQUIRED_MESSAGE = "Email, phone, firstName, and lastName are required."
VIP_REQUIRED_MESSAGE = "All fields are required including preferred areas."
UPDATE_REQUIRED_MESSAGE = "Email is required"


def _areas_field(**kwargs):
    return fields.List(fields.Str(validate=validate.OneOf(AREA_IDS)), data_key='preferredAreas', **kwargs)


def _buyer_type_field(**kwargs):
    return fields.Str(validate=validate.OneOf(BUYER_TYPE_IDS), data_key='buyerType', **kwargs)


class BuyerCreateSchema(BaseSchema):
    """Schema for POST /buyer/create."""
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('buyerType', 'source', 'emailStatus', 'emailPermissionStatus')

    email = fields.Str(required=True, validate=not_blank)
    phone = fields.Str(required=True, validate=not_blank)
    first_name = fields.Str(required=True, validate=not_blank, data_key='firstName')
    last_name = fields.Str(required=True, validate=not_blank, data_key='lastName')
    buyer_type = _buyer_type_field(load_default=None, allow_none=True)
    source = fields.Str(load_default=None, allow_none=True)
    preferred_areas = _areas_field(load_default=list, allow_none=True)
    email_status = fields.Str(load_default=None, allow_none=True, data_key='emailStatus')
    email_permission_status = fields.Str(load_default=None, allow_none=True, data_key='emailPermissionStatus')
    email_lists = fields.List(fields.Str(), load_default=list, allow_none=True, data_key='emailLists')


class BuyerUpdateSchema(BaseSchema):
    """
    Schema for PUT /buyer/update/<id>.

    Every optional field loads as None when absent: the update replaces the
    whole editable record.
    """
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('phone', 'firstName', 'lastName', 'buyerType', 'source')

    email = fields.Str(required=True, validate=not_blank)
    phone = fields.Str(load_default=None, allow_none=True)
    first_name = fields.Str(load_default=None, allow_none=True, data_key='firstName')
    last_name = fields.Str(load_default=None, allow_none=True, data_key='lastName')
    buyer_type = _buyer_type_field(load_default=None, allow_none=True)
    source = fields.Str(load_default=None, allow_none=True)
    preferred_areas = _areas_field(load_default=list, allow_none=True)


class VipBuyerSchema(BaseSchema):
    """Schema for POST /buyer/createVipBuyer."""
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('auth0Id',)

    email = fields.Str(required=True, validate=not_blank)
    phone = fields.Str(required=True, validate=not_blank)
    buyer_type = _buyer_type_field(required=True)
    first_name = fields.Str(required=True, validate=not_blank, data_key='firstName')
    last_name = fields.Str(required=True, validate=not_blank, data_key='lastName')
    preferred_areas = _areas_field(required=True, validate=validate.Length(min=1))
    auth0_id = fields.Str(load_default=None, allow_none=True, data_key='auth0Id')


class SendEmailSchema(BaseSchema):
    """Schema for POST /buyer/sendEmail."""
    class Meta:
        unknown = EXCLUDE

    buyer_ids = fields.List(fields.Str(), required=True, validate=validate.Length(min=1), data_key='buyerIds')
    subject = fields.Str(required=True, validate=not_blank)
    content = fields.Str(required=True, validate=not_blank)
    include_unsubscribed = fields.Bool(load_default=False, data_key='includeUnsubscribed')


class BuyerImportSchema(BaseSchema):
    """
    Schema for POST /buyer/import.

    Rows stay raw dicts: each one is validated on its own by the import so a
    bad row fails alone.
    """
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('source',)

    buyers = fields.List(fields.Raw(), required=True, validate=validate.Length(min=1))
    source = fields.Str(load_default=SOURCE_CSV_IMPORT, allow_none=True)


SEND_EMAIL_REQUIRED_MESSAGES = {
    'buyerIds': "At least one buyer ID is required",
    'subject': "Email subject and content are required",
    'content': "Email subject and content are required",
}
