"""
Comment Blueprint — executive comment threads on projects.

Endpoints:
  GET    /api/comments?projectId=   — threads (newest first) with replies
  POST   /api/comments              — top-level (executive/admin) or reply (engineer/admin)
  GET    /api/comments/<id>         — one comment with replies
  DELETE /api/comments/<id>         — author or admin; removes replies too
"""

from flask import Blueprint

from tracker.auth import current_user
from tracker.blueprints import arg, json_body
from tracker.services import comment_service
from tracker.utils.errors import api_ok

comment_bp = Blueprint("comments", __name__, url_prefix="/api/comments")


@comment_bp.route("", methods=["GET"])
def list_comments():
    threads = comment_service.list_threads(arg("projectId"))
    return api_ok(threads, total=len(threads))


@comment_bp.route("", methods=["POST"])
def create_comment():
    comment = comment_service.create_comment(json_body(), current_user())
    return api_ok(comment, status=201)


@comment_bp.route("/<comment_id>", methods=["GET"])
def get_comment(comment_id):
    return api_ok(comment_service.get_comment(comment_id))


@comment_bp.route("/<comment_id>", methods=["DELETE"])
def delete_comment(comment_id):
    removed = comment_service.delete_comment(comment_id, current_user())
    return api_ok({"deleted": removed}, message="Comment deleted")
