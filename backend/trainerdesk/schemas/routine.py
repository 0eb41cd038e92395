"""Routine resource schemas.

Request bodies use camelCase keys (``dayLabel``, ``exerciseId``...) mapped to
the service DTO field names through ``data_key``. Exercise ids and positions
are loaded as raw values; the routine service validates them so every problem
in a payload is reported with its ``days[i].entries[j]`` path.
"""

from __future__ import annotations

from typing import Any

from marshmallow import EXCLUDE, Schema, ValidationError, fields, post_load, validate

from trainerdesk.services.routines.dto import DayIn, EntryIn

from .common import ReferenceSchema

# ------------------------------ Request bodies ---------------------------- #


class EntryInSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(load_default=None, allow_none=True)
    exercise_id = fields.Raw(required=True, allow_none=True, data_key="exerciseId")
    position = fields.Raw(required=True, allow_none=True, data_key="positionInDay")
    sets = fields.String(load_default=None, allow_none=True)
    reps = fields.String(load_default=None, allow_none=True)
    load = fields.String(load_default=None, allow_none=True)
    rest = fields.String(load_default=None, allow_none=True)
    notes = fields.String(load_default=None, allow_none=True)

    @post_load
    def make_entry(self, data: dict[str, Any], **_: Any) -> EntryIn:
        return EntryIn(**data)


class DayInSchema(Schema):
    class Meta:
        unknown = EXCLUDE

    id = fields.Integer(load_default=None, allow_none=True)
    day_label = fields.String(required=True, allow_none=True, data_key="dayLabel")
    position = fields.Raw(required=True, allow_none=True, data_key="positionInRoutine")
    subtitle = fields.String(load_default=None, allow_none=True)
    entries = fields.List(fields.Nested(EntryInSchema), load_default=list)

    @post_load
    def make_day(self, data: dict[str, Any], **_: Any) -> DayIn:
        return DayIn(**data)


class RoutineCreateSchema(Schema):
    """Payload for ``POST /routines``."""

    class Meta:
        unknown = EXCLUDE

    kind = fields.String(required=True)
    title = fields.String(required=True, validate=validate.Length(max=150))
    organization_mode = fields.String(required=True, data_key="organizationMode")
    description = fields.String(load_default=None, allow_none=True)
    student_id = fields.Integer(load_default=None, allow_none=True, data_key="studentId")
    folder_id = fields.Integer(load_default=None, allow_none=True, data_key="folderId")
    status = fields.String(load_default=None, allow_none=True)
    expires_on = fields.Date(load_default=None, allow_none=True, data_key="expiresOn")
    planned_sessions = fields.Integer(
        load_default=None, allow_none=True, strict=True, data_key="plannedSessions"
    )
    days = fields.List(fields.Nested(DayInSchema), load_default=list)


class RoutineUpdateSchema(Schema):
    """Payload for ``PUT /routines/:id``; absent keys are left untouched."""

    class Meta:
        unknown = EXCLUDE

    kind = fields.String()
    title = fields.String(validate=validate.Length(max=150))
    organization_mode = fields.String(data_key="organizationMode")
    description = fields.String(allow_none=True)
    status = fields.String(allow_none=True)
    folder_id = fields.Integer(allow_none=True, data_key="folderId")
    expires_on = fields.Date(allow_none=True, data_key="expiresOn")
    planned_sessions = fields.Integer(allow_none=True, strict=True, data_key="plannedSessions")
    completed_sessions = fields.Integer(strict=True, data_key="completedSessions")
    days = fields.List(fields.Nested(DayInSchema), allow_none=True)


class RoutineFilterSchema(Schema):
    """Query parameters accepted by ``GET /routines``.

    ``folderId=none`` selects templates outside any folder.
    """

    class Meta:
        unknown = EXCLUDE

    kind = fields.String(load_default=None)
    student_id = fields.Integer(load_default=None, data_key="studentId")
    folder_id = fields.String(load_default=None, data_key="folderId")
    status = fields.String(load_default=None)
    limit = fields.Integer(load_default=None, validate=validate.Range(min=1))

    @post_load
    def split_folder(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        raw = data.pop("folder_id", None)
        data["no_folder"] = False
        data["folder_id"] = None
        if raw is None or raw == "":
            return data
        if raw.lower() in ("none", "null"):
            data["no_folder"] = True
        elif raw.isdigit():
            data["folder_id"] = int(raw)
        else:
            raise ValidationError("Must be a folder id or 'none'.", field_name="folderId")
        return data


class MoveToFolderSchema(Schema):
    """Body of ``PUT /routines/:id/folder``; ``null`` leaves every folder."""

    class Meta:
        unknown = EXCLUDE

    folder_id = fields.Integer(required=True, allow_none=True, data_key="folderId")


class RoutineReorderSchema(Schema):
    """Body of ``PUT /routines/reorder``."""

    class Meta:
        unknown = EXCLUDE

    context_id = fields.Integer(load_default=None, allow_none=True, data_key="contextId")
    ordered_routine_ids = fields.List(fields.Raw(), required=True, data_key="orderedRoutineIds")


class CloneToStudentSchema(Schema):
    """Body of ``POST /routines/clone-to-student``."""

    class Meta:
        unknown = EXCLUDE

    source_routine_id = fields.Integer(required=True, data_key="sourceRoutineId")
    student_id = fields.Integer(required=True, data_key="studentId")
    expires_on = fields.Date(load_default=None, allow_none=True, data_key="expiry")
    planned_sessions = fields.Integer(
        load_default=None, allow_none=True, strict=True, data_key="plannedSessions"
    )


# ------------------------------ Representations --------------------------- #


class EntrySchema(Schema):
    id = fields.Integer(required=True)
    exercise_id = fields.Integer(attribute="exercise.id", data_key="exerciseId")
    exercise = fields.Nested(ReferenceSchema)
    sets = fields.String(allow_none=True)
    reps = fields.String(allow_none=True)
    load = fields.String(allow_none=True)
    rest = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)
    position = fields.Integer(data_key="positionInDay")
    completed = fields.Boolean()


class DaySchema(Schema):
    id = fields.Integer(required=True)
    day_label = fields.String(data_key="dayLabel")
    subtitle = fields.String(allow_none=True)
    position = fields.Integer(data_key="positionInRoutine")
    entries = fields.List(fields.Nested(EntrySchema))
    done_this_week = fields.Boolean(allow_none=True, data_key="doneThisWeek")


class RoutineSchema(Schema):
    """Representation of a routine with its days and resolved references."""

    id = fields.Integer(required=True)
    kind = fields.String(required=True)
    title = fields.String(required=True)
    description = fields.String(allow_none=True)
    organization_mode = fields.String(data_key="organizationMode")
    trainer = fields.Nested(ReferenceSchema)
    student = fields.Nested(ReferenceSchema, allow_none=True)
    folder = fields.Nested(ReferenceSchema, allow_none=True)
    status = fields.String(allow_none=True)
    position_in_folder = fields.Integer(allow_none=True, data_key="positionInFolder")
    expires_on = fields.Date(allow_none=True, data_key="expiresOn")
    planned_sessions = fields.Integer(allow_none=True, data_key="plannedSessions")
    completed_sessions = fields.Integer(data_key="completedSessions")
    is_completed = fields.Boolean(data_key="isCompleted")
    progress = fields.String(allow_none=True)
    created_at = fields.DateTime(allow_none=True, data_key="createdAt")
    updated_at = fields.DateTime(allow_none=True, data_key="updatedAt")
    days = fields.List(fields.Nested(DaySchema))
    next_suggested_day_id = fields.Integer(allow_none=True, data_key="nextSuggestedDayId")
