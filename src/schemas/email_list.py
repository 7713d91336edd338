# -*- coding: utf-8 -*-
"""Email list request schemas."""
from marshmallow import fields, validate, EXCLUDE

from src.config.buyers import AREA_IDS, BUYER_TYPE_IDS
from src.schemas import BaseSchema, not_blank

LIST_NAME_REQUIRED_MESSAGE = "List name is required"
MEMBERS_REQUIRED_MESSAGE = "At least one buyer ID is required"


class CriteriaSchema(BaseSchema):
    class Meta:
        unknown = EXCLUDE

    areas = fields.List(fields.Str(validate=validate.OneOf(AREA_IDS)), load_default=list)
    buyer_types = fields.List(fields.Str(validate=validate.OneOf(BUYER_TYPE_IDS)),
                              load_default=list, data_key='buyerTypes')
    is_vip = fields.Bool(load_default=False, data_key='isVIP')


class EmailListCreateSchema(BaseSchema):
    """Schema for POST /email-lists."""
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('description',)

    name = fields.Str(required=True, validate=not_blank)
    description = fields.Str(load_default=None, allow_none=True)
    criteria = fields.Nested(CriteriaSchema, load_default=dict)
    buyer_ids = fields.List(fields.Str(), load_default=list, data_key='buyerIds')


class EmailListUpdateSchema(BaseSchema):
    """
    Schema for PUT /email-lists/<id>.

    Absent fields stay absent so the list keeps its stored values.
    """
    class Meta:
        unknown = EXCLUDE

    name = fields.Str(validate=not_blank)
    description = fields.Str(allow_none=True)
    criteria = fields.Nested(CriteriaSchema)


class MembersSchema(BaseSchema):
    """Schema for POST/DELETE /email-lists/<id>/members."""
    class Meta:
        unknown = EXCLUDE

    buyer_ids = fields.List(fields.Str(), required=True, validate=validate.Length(min=1), data_key='buyerIds')
