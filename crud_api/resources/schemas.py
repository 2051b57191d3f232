"""Wire shape of users and chocolates."""
from __future__ import annotations

from crud_api.jsonapi import Reference, ResourceSchema


class ChocolateSchema(ResourceSchema):
    type_name = "chocolates"
    attributes = {"name": "name", "taste": "taste"}


class UserSchema(ResourceSchema):
    type_name = "users"
    attributes = {"user-name": "username"}
    references = (Reference(name="sweets", type="chocolates"),)
