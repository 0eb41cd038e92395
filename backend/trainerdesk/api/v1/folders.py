"""Trainer folder endpoints."""

from __future__ import annotations

from flask import Blueprint

from trainerdesk.api.deps import (
    current_context,
    json_response,
    load_body,
    no_content,
    require_role,
    timing,
)
from trainerdesk.schemas import FolderReorderSchema, FolderSchema, FolderWriteSchema
from trainerdesk.services.folders import FolderService
from trainerdesk.services.folders.dto import FolderCreateIn, FolderUpdateIn
from trainerdesk.services.ordering import OrderingService
from trainerdesk.services.ordering.dto import ReorderFoldersIn

bp = Blueprint("folders", __name__)

folder_schema = FolderSchema()
folder_list_schema = FolderSchema(many=True)
folder_write_schema = FolderWriteSchema()
folder_reorder_schema = FolderReorderSchema()


@bp.get("")
@require_role("trainer")
@timing
def list_folders():
    """Return the trainer's folders in order with their template counts."""

    result = FolderService(ctx=current_context()).list()
    data = folder_list_schema.dump(result.items)
    return json_response({"data": data, "meta": {"total": len(data)}})


@bp.post("")
@require_role("trainer")
@timing
def create_folder():
    payload = load_body(folder_write_schema)
    folder = FolderService(ctx=current_context()).create(FolderCreateIn(name=payload["name"]))
    return json_response({"data": folder_schema.dump(folder)}, status=201)


@bp.put("/<int:folder_id>")
@require_role("trainer")
@timing
def rename_folder(folder_id: int):
    payload = load_body(folder_write_schema)
    folder = FolderService(ctx=current_context()).update(
        FolderUpdateIn(folder_id=folder_id, name=payload["name"])
    )
    return json_response({"data": folder_schema.dump(folder)})


@bp.delete("/<int:folder_id>")
@require_role("trainer")
@timing
def delete_folder(folder_id: int):
    """Delete a folder; its templates move to the no-folder bucket."""

    FolderService(ctx=current_context()).delete(folder_id)
    return no_content()


@bp.put("/reorder")
@require_role("trainer")
@timing
def reorder_folders():
    payload = load_body(folder_reorder_schema)
    result = OrderingService(ctx=current_context()).reorder_folders(ReorderFoldersIn(**payload))
    return json_response({"data": {"orderedFolderIds": result.ordered_ids}})
