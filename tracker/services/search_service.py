"""
Search Service — combined worklog/project search with paging.

Worklog-level filters (date range, stage, assignee, keyword) and
project-level filters (customer, division, status) are applied in one
pass; worklogs whose project no longer exists are dropped.
"""

import logging

from tracker.services.project_service import project_map
from tracker.services.user_service import user_name_map
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import paginate

logger = logging.getLogger(__name__)

DEFAULT_KEYWORD_SCOPE = "content,issue"

SORT_FIELDS = {
    "date": "date",
    "project": "item",
    "customer": "customer",
    "stage": "stage",
    "assignee": "assigneeName",
}


def _contains(value, needle) -> bool:
    return needle in (value or "").lower()


def keyword_matches(log: dict, keyword: str, scope: str = DEFAULT_KEYWORD_SCOPE) -> bool:
    """Scoped keyword test.

    ``content`` scope looks at content and plan, ``issue`` scope at the
    issue text.  With neither scope selected the keyword is matched against
    content, item and customer.
    """
    needle = keyword.lower()
    in_content = "content" in scope
    in_issue = "issue" in scope
    if in_content and (_contains(log.get("content"), needle) or _contains(log.get("plan"), needle)):
        return True
    if in_issue and _contains(log.get("issue"), needle):
        return True
    if not in_content and not in_issue:
        return any(_contains(log.get(f), needle) for f in ("content", "item", "customer"))
    return False


def search(params: dict) -> dict:
    keyword = params.get("keyword") or ""
    scope = params.get("keywordScope") or DEFAULT_KEYWORD_SCOPE
    customer = (params.get("customer") or "").lower()

    projects = project_map()
    names = user_name_map()
    results = []
    for log in get_store().get_all_as_objects(SHEET_NAMES.WORKLOGS):
        project = projects.get(log.get("projectId"))
        if not project:
            continue
        date = log.get("date", "")
        if params.get("startDate") and date < params["startDate"]:
            continue
        if params.get("endDate") and date > params["endDate"]:
            continue
        if customer and not _contains(project.get("customer"), customer):
            continue
        if params.get("division") and project.get("division") != params["division"]:
            continue
        if params.get("stage") and log.get("stage") != params["stage"]:
            continue
        if params.get("assigneeId") and log.get("assigneeId") != params["assigneeId"]:
            continue
        if params.get("status") and project.get("status") != params["status"]:
            continue
        if keyword and not keyword_matches(log, keyword, scope):
            continue

        results.append({
            "id": log["id"],
            "date": date,
            "projectId": log.get("projectId", ""),
            "item": log.get("item", ""),
            "customer": log.get("customer", ""),
            "stage": log.get("stage", ""),
            "assigneeId": log.get("assigneeId", ""),
            "assigneeName": names.get(log.get("assigneeId"), log.get("assigneeId", "")),
            "content": log.get("content", ""),
            "plan": log.get("plan") or None,
            "issue": log.get("issue") or None,
            "issueStatus": log.get("issueStatus") or None,
            "projectStatus": project.get("status", ""),
            "division": project.get("division", ""),
            "projectDivision": project.get("division", ""),
        })

    sort_key = SORT_FIELDS.get(params.get("sortBy") or "date", "date")
    descending = (params.get("sortOrder") or "desc") != "asc"
    results.sort(key=lambda r: r[sort_key] or "", reverse=descending)

    logger.debug("Search matched %d worklogs", len(results))
    return paginate(results, params.get("page") or 1, params.get("pageSize") or 20)
