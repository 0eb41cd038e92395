"""Student endpoints: assigned routines, session completion and history."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from trainerdesk.api.deps import current_context, json_response, load_body, require_role, timing
from trainerdesk.schemas import (
    CompleteDayResultSchema,
    CompleteDaySchema,
    CompletedDaySchema,
    EntryToggleSchema,
    FeedbackSchema,
    HistoryQuerySchema,
    RoutineSchema,
    SessionSchema,
    WeekSessionsSchema,
    build_meta,
)
from trainerdesk.services.progress import ProgressCommandService, ProgressQueryService
from trainerdesk.services.progress.dto import CompleteDayIn, FeedbackIn, HistoryIn, ToggleEntryIn

bp = Blueprint("student", __name__)

routine_schema = RoutineSchema()
routine_list_schema = RoutineSchema(many=True)
complete_day_schema = CompleteDaySchema()
complete_result_schema = CompleteDayResultSchema()
feedback_schema = FeedbackSchema()
history_query_schema = HistoryQuerySchema()
session_schema = SessionSchema()
session_list_schema = SessionSchema(many=True)
completed_day_list_schema = CompletedDaySchema(many=True)
week_schema = WeekSessionsSchema()
toggle_schema = EntryToggleSchema()


def _query_service() -> ProgressQueryService:
    return ProgressQueryService(
        ctx=current_context(),
        history_default_limit=current_app.config["HISTORY_DEFAULT_LIMIT"],
        history_max_limit=current_app.config["HISTORY_MAX_LIMIT"],
    )


@bp.get("/routines")
@require_role("student")
@timing
def list_my_routines():
    """Return the student's routines with this week's completion flags."""

    result = _query_service().list_student_routines()
    data = routine_list_schema.dump(result.items)
    return json_response({"data": data, "meta": {"total": len(data)}})


@bp.get("/routines/<int:routine_id>")
@require_role("student")
@timing
def get_my_routine(routine_id: int):
    routine = _query_service().get_student_routine(routine_id)
    return json_response({"data": routine_schema.dump(routine)})


@bp.patch("/routines/<int:routine_id>/entries/<int:entry_id>/completed")
@require_role("student")
@timing
def toggle_entry(routine_id: int, entry_id: int):
    """Flip the per-entry ``completed`` flag."""

    result = ProgressCommandService(ctx=current_context()).toggle_entry_completed(
        ToggleEntryIn(routine_id=routine_id, entry_id=entry_id)
    )
    return json_response({"data": toggle_schema.dump(result)})


@bp.get("/routines/<int:routine_id>/completed-sessions")
@require_role("student")
@timing
def completed_sessions(routine_id: int):
    """Return ``(dayId, completedAt)`` pairs for one routine."""

    result = _query_service().list_completed_for_routine(routine_id)
    return json_response({"data": completed_day_list_schema.dump(result.items)})


@bp.post("/sessions/complete-day")
@require_role("student")
@timing
def complete_day():
    """Record a completed training day and bump the routine counter."""

    payload = load_body(complete_day_schema)
    result = ProgressCommandService(ctx=current_context()).complete_training_day(
        CompleteDayIn(**payload)
    )
    return json_response({"data": complete_result_schema.dump(result)}, status=201)


@bp.patch("/sessions/<int:session_id>/feedback")
@require_role("student")
@timing
def amend_feedback(session_id: int):
    payload = load_body(feedback_schema)
    session = ProgressCommandService(ctx=current_context()).amend_feedback(
        FeedbackIn(session_id=session_id, **payload)
    )
    return json_response({"data": session_schema.dump(session)})


@bp.get("/sessions/current-week")
@require_role("student")
@timing
def current_week():
    """Sessions completed since Monday 00:00 UTC."""

    result = _query_service().list_current_week()
    return json_response({"data": week_schema.dump(result)})


@bp.get("/history")
@require_role("student")
@timing
def history():
    """Return the paginated session history, newest first."""

    query = history_query_schema.load(request.args)
    result = _query_service().history(HistoryIn(page=query["page"], limit=query["limit"]))
    return json_response(
        {"data": session_list_schema.dump(result.items), "meta": build_meta(result.meta)}
    )
