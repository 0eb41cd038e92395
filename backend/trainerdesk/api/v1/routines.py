"""Trainer routine endpoints: CRUD, folder moves, reordering and cloning."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from trainerdesk.api.deps import (
    current_context,
    json_response,
    load_body,
    no_content,
    require_role,
    timing,
)
from trainerdesk.schemas import (
    CloneToStudentSchema,
    MoveToFolderSchema,
    RoutineCreateSchema,
    RoutineFilterSchema,
    RoutineReorderSchema,
    RoutineSchema,
    RoutineUpdateSchema,
)
from trainerdesk.services.ordering import OrderingService
from trainerdesk.services.ordering.dto import ReorderRoutinesIn
from trainerdesk.services.routines import (
    RoutineCloneService,
    RoutineCommandService,
    RoutineQueryService,
)
from trainerdesk.services.routines.dto import (
    CloneToStudentIn,
    MoveToFolderIn,
    RoutineCreateIn,
    RoutineListIn,
    RoutineUpdateIn,
)

bp = Blueprint("routines", __name__)

routine_schema = RoutineSchema()
routine_list_schema = RoutineSchema(many=True)
routine_create_schema = RoutineCreateSchema()
routine_update_schema = RoutineUpdateSchema()
routine_filter_schema = RoutineFilterSchema()
move_schema = MoveToFolderSchema()
reorder_schema = RoutineReorderSchema()
clone_schema = CloneToStudentSchema()


@bp.get("")
@require_role("trainer")
@timing
def list_routines():
    """Return the trainer's routines in listing order."""

    filters = routine_filter_schema.load(request.args)
    service = RoutineQueryService(
        ctx=current_context(),
        max_limit=current_app.config["ROUTINE_LIST_MAX_LIMIT"],
    )
    result = service.list(RoutineListIn(**filters))
    data = routine_list_schema.dump(result.items)
    return json_response({"data": data, "meta": {"total": len(data)}})


@bp.post("")
@require_role("trainer")
@timing
def create_routine():
    """Create a routine together with its days and entries."""

    payload = load_body(routine_create_schema)
    routine = RoutineCommandService(ctx=current_context()).create(RoutineCreateIn(**payload))
    return json_response({"data": routine_schema.dump(routine)}, status=201)


@bp.get("/<int:routine_id>")
@require_role("trainer")
@timing
def get_routine(routine_id: int):
    """Return one routine with every reference resolved."""

    routine = RoutineQueryService(ctx=current_context()).get(routine_id)
    return json_response({"data": routine_schema.dump(routine)})


@bp.put("/<int:routine_id>")
@require_role("trainer")
@timing
def update_routine(routine_id: int):
    """Patch metadata and/or replace the day subtree."""

    payload = load_body(routine_update_schema)
    routine = RoutineCommandService(ctx=current_context()).update(
        RoutineUpdateIn(routine_id=routine_id, **payload)
    )
    return json_response({"data": routine_schema.dump(routine)})


@bp.put("/<int:routine_id>/folder")
@require_role("trainer")
@timing
def move_routine(routine_id: int):
    """Move a template into a folder, or out of any folder with ``null``."""

    payload = load_body(move_schema)
    routine = RoutineCommandService(ctx=current_context()).move_to_folder(
        MoveToFolderIn(routine_id=routine_id, folder_id=payload["folder_id"])
    )
    return json_response({"data": routine_schema.dump(routine)})


@bp.delete("/<int:routine_id>")
@require_role("trainer")
@timing
def delete_routine(routine_id: int):
    """Delete a routine and its days."""

    RoutineCommandService(ctx=current_context()).delete(routine_id)
    return no_content()


@bp.put("/reorder")
@require_role("trainer")
@timing
def reorder_routines():
    """Store a new order for the templates of one folder bucket."""

    payload = load_body(reorder_schema)
    service = OrderingService(
        ctx=current_context(),
        strict=current_app.config["ROUTINE_REORDER_STRICT"],
    )
    result = service.reorder_routines(ReorderRoutinesIn(**payload))
    return json_response(
        {"data": {"orderedRoutineIds": result.ordered_ids, "skippedIds": result.skipped_ids}}
    )


@bp.post("/clone-to-student")
@require_role("trainer")
@timing
def clone_to_student():
    """Copy a routine into a new individual routine for a student."""

    payload = load_body(clone_schema)
    routine = RoutineCloneService(ctx=current_context()).clone_to_student(CloneToStudentIn(**payload))
    return json_response({"data": routine_schema.dump(routine)}, status=201)
