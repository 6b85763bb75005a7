"""
Search Blueprint — paginated worklog search joined with project fields.

Endpoints:
  GET /api/search   — startDate, endDate, customer, division, stage, assigneeId,
                      status, keyword, keywordScope, sortBy, sortOrder, page, pageSize
"""

from flask import Blueprint, request

from tracker.auth import require_min_role
from tracker.services import search_service
from tracker.utils.errors import api_ok

search_bp = Blueprint("search", __name__, url_prefix="/api/search")


@search_bp.route("", methods=["GET"])
@require_min_role("engineer", message="You are not allowed to search worklogs")
def search():
    return api_ok(search_service.search(request.args.to_dict()))
