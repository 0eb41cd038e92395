"""Folder resource schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate


class FolderWriteSchema(Schema):
    """Payload for creating or renaming a folder."""

    class Meta:
        unknown = EXCLUDE

    name = fields.String(required=True, validate=validate.Length(max=100))


class FolderReorderSchema(Schema):
    """Body of ``PUT /folders/reorder``."""

    class Meta:
        unknown = EXCLUDE

    ordered_folder_ids = fields.List(fields.Raw(), required=True, data_key="orderedFolderIds")


class FolderSchema(Schema):
    """Representation of a folder with its template count."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    position = fields.Integer(required=True)
    template_count = fields.Integer(required=True, data_key="templateCount")
    created_at = fields.DateTime(allow_none=True, data_key="createdAt")
    updated_at = fields.DateTime(allow_none=True, data_key="updatedAt")
