"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from trainerdesk.services._shared.dto import PageMeta


class PaginationQuerySchema(Schema):
    """Validate ``page``/``limit`` query parameters; ``limit`` stays optional."""

    class Meta:
        unknown = EXCLUDE

    page = fields.Integer(load_default=1, validate=validate.Range(min=1))
    limit = fields.Integer(load_default=None, validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data.setdefault("page", 1)
        return data


class MetaSchema(Schema):
    """Metadata block for paginated responses."""

    total = fields.Integer(required=True)
    page = fields.Integer(required=True)
    limit = fields.Integer(required=True)
    total_pages = fields.Integer(required=True, data_key="totalPages")


class ReferenceSchema(Schema):
    """Resolved reference to another record (exercise, student, folder...)."""

    id = fields.Integer(required=True)
    label = fields.String(required=True)
    known = fields.Boolean(required=True)
    detail = fields.String(allow_none=True)


def build_meta(meta: PageMeta) -> dict[str, int]:
    """Return a ``meta`` mapping for paginated responses."""

    return MetaSchema().dump(meta)
