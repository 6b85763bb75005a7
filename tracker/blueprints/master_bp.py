"""
Master Data Blueprint — customer and model pick-lists.

Endpoints:
  GET    /api/master/<kind>          — active entries sorted by order (kind: customers | models)
  POST   /api/master/<kind>          — add { name } (sysadmin)
  PUT    /api/master/<kind>          — { id, direction } or { id, newOrder } (sysadmin)
  DELETE /api/master/<kind>?id=      — remove (sysadmin)
  POST   /api/master/init            — seed initial lists (sysadmin)
"""

from flask import Blueprint

from tracker.auth import require_role
from tracker.blueprints import arg, json_body
from tracker.core.exceptions import ValidationError
from tracker.services import master_service
from tracker.utils.errors import api_ok
from tracker.utils.helpers import to_bool

master_bp = Blueprint("master", __name__, url_prefix="/api/master")

_SYSADMIN_ONLY = "Only system administrators may edit master data"


@master_bp.route("/init", methods=["POST"])
@require_role("sysadmin", message=_SYSADMIN_ONLY)
def init_master():
    inserted = master_service.seed_initial(force=to_bool(json_body().get("force")))
    return api_ok(inserted, message="Master data initialised")


@master_bp.route("/<kind>", methods=["GET"])
def list_entries(kind):
    items = master_service.list_entries(kind)
    return api_ok({"items": items, "total": len(items)})


@master_bp.route("/<kind>", methods=["POST"])
@require_role("sysadmin", message=_SYSADMIN_ONLY)
def add_entry(kind):
    entry = master_service.add_entry(kind, json_body().get("name"))
    return api_ok(entry, status=201)


@master_bp.route("/<kind>", methods=["PUT"])
@require_role("sysadmin", message=_SYSADMIN_ONLY)
def reorder_entry(kind):
    data = json_body()
    entry_id = data.get("id")
    if not entry_id:
        raise ValidationError("id is required")
    if data.get("direction"):
        master_service.move_entry(kind, entry_id, data["direction"])
    elif data.get("newOrder") is not None:
        master_service.set_entry_order(kind, entry_id, data["newOrder"])
    else:
        raise ValidationError("direction or newOrder is required")
    return api_ok(master_service.list_entries(kind), message="Order updated")


@master_bp.route("/<kind>", methods=["DELETE"])
@require_role("sysadmin", message=_SYSADMIN_ONLY)
def delete_entry(kind):
    entry_id = arg("id")
    if not entry_id:
        raise ValidationError("id is required")
    master_service.delete_entry(kind, entry_id)
    return api_ok(None, message="Entry deleted")
