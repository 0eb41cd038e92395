"""Workout session schemas used by the student endpoints."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields

from .common import PaginationQuerySchema, ReferenceSchema


class CompleteDaySchema(Schema):
    """Body of ``POST /student/sessions/complete-day``."""

    class Meta:
        unknown = EXCLUDE

    routine_id = fields.Integer(required=True, data_key="routineId")
    day_id = fields.Integer(required=True, data_key="dayId")
    effort = fields.String(load_default=None, allow_none=True)
    comment = fields.String(load_default=None, allow_none=True)


class FeedbackSchema(Schema):
    """Body of ``PATCH /student/sessions/:id/feedback``; absent keys stay as stored."""

    class Meta:
        unknown = EXCLUDE

    effort = fields.String(allow_none=True)
    comment = fields.String(allow_none=True)


class HistoryQuerySchema(PaginationQuerySchema):
    """``page``/``limit`` for the history listing."""


class SessionSchema(Schema):
    """Representation of a completed workout session."""

    id = fields.Integer(required=True)
    routine_id = fields.Integer(allow_none=True, data_key="routineId")
    routine = fields.Nested(ReferenceSchema, allow_none=True)
    trainer = fields.Nested(ReferenceSchema)
    day_id = fields.Integer(data_key="dayId")
    day_label = fields.String(data_key="dayLabel")
    day_subtitle = fields.String(allow_none=True, data_key="daySubtitle")
    occurred_at = fields.DateTime(allow_none=True, data_key="occurredAt")
    completed_at = fields.DateTime(allow_none=True, data_key="completedAt")
    status = fields.String()
    effort = fields.String(allow_none=True)
    comment = fields.String(allow_none=True)


class CompleteDayResultSchema(Schema):
    session = fields.Nested(SessionSchema)
    completed_sessions = fields.Integer(data_key="completedSessions")
    planned_sessions = fields.Integer(allow_none=True, data_key="plannedSessions")
    is_completed = fields.Boolean(data_key="isCompleted")


class CompletedDaySchema(Schema):
    day_id = fields.Integer(data_key="dayId")
    completed_at = fields.DateTime(allow_none=True, data_key="completedAt")


class WeekSessionsSchema(Schema):
    week_start = fields.DateTime(data_key="weekStart")
    week_end = fields.DateTime(data_key="weekEnd")
    items = fields.List(fields.Nested(SessionSchema))


class EntryToggleSchema(Schema):
    routine_id = fields.Integer(data_key="routineId")
    entry_id = fields.Integer(data_key="entryId")
    completed = fields.Boolean()
