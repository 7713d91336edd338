# -*- coding: utf-8 -*-
"""User request schemas."""
from marshmallow import fields, validate, EXCLUDE

from src.config.buyers import USER_ROLES
from src.schemas import BaseSchema, not_blank


class UserCreateSchema(BaseSchema):
    class Meta:
        unknown = EXCLUDE

    BLANK_TO_NONE = ('firstName', 'lastName', 'role')

    email = fields.Email(required=True)
    first_name = fields.Str(load_default=None, allow_none=True, data_key='firstName')
    last_name = fields.Str(load_default=None, allow_none=True, data_key='lastName')
    role = fields.Str(load_default=None, allow_none=True, validate=validate.OneOf(USER_ROLES))


class UserStatusSchema(BaseSchema):
    class Meta:
        unknown = EXCLUDE

    is_active = fields.Bool(required=True, data_key='isActive')


class ReassignPropertiesSchema(BaseSchema):
    class Meta:
        unknown = EXCLUDE

    target_user_id = fields.Str(required=True, validate=not_blank, data_key='targetUserId')
