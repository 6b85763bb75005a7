"""
Excel exports (openpyxl).

Every builder returns ``(io.BytesIO, filename)``; the export blueprint
wraps it with ``send_file`` and an RFC 5987 Content-Disposition.
Headers, sheet names and file names are Korean, matching what users
download today.
"""

import io
import logging
import re

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from tracker.constants import ISSUE_OPEN, ISSUE_RESOLVED, RESPONSIBILITY_LABELS, SCHEDULE_STATUS_LABELS
from tracker.services.favorite_service import favorite_project_ids
from tracker.services.project_service import filter_projects, project_map
from tracker.services.user_service import user_name_map
from tracker.services.worklog_service import filter_worklogs, sort_newest_first
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import split_csv, to_int, today_kst

logger = logging.getLogger(__name__)

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

HEADER_FILL = PatternFill(start_color="354A5F", end_color="354A5F", fill_type="solid")
HEADER_FONT = Font(color="FFFFFF", bold=True, size=11)
THIN_BORDER = Border(
    left=Side(style="thin"),
    right=Side(style="thin"),
    top=Side(style="thin"),
    bottom=Side(style="thin"),
)

PROJECT_COLUMNS = [
    ("No", 5), ("상태", 8), ("고객사", 15), ("ITEM", 20), ("PART NO", 15),
    ("소속", 8), ("구분", 8), ("모델", 15), ("팀장", 10), ("팀원", 20),
    ("현재단계", 10), ("시작일", 12), ("종료일", 12), ("비고", 30),
]
GANTT_COLUMNS = [
    ("No", 5), ("프로젝트ID", 15), ("상태", 8), ("고객사", 15), ("ITEM", 20),
    ("소속", 8), ("구분", 8), ("팀장", 10), ("현재단계", 10), ("시작일", 12), ("종료일", 12),
]
SCHEDULE_COLUMNS = [
    ("No", 5), ("프로젝트", 30), ("단계", 10), ("항목명", 30), ("계획시작일", 12),
    ("계획종료일", 12), ("실적시작일", 12), ("실적종료일", 12), ("업무구분", 8),
    ("관련부문", 10), ("상태", 8), ("비고", 30),
]
WORKLOG_COLUMNS = [
    ("No", 5), ("날짜", 12), ("ITEM", 20), ("고객사", 15), ("단계", 10), ("담당자", 10),
    ("참여자", 20), ("계획", 40), ("업무내용", 50), ("이슈사항", 40), ("이슈상태", 8),
]

ISSUE_STATUS_LABELS = {ISSUE_RESOLVED: "해결됨", ISSUE_OPEN: "미해결"}

_UNSAFE_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')


def _stamp() -> str:
    return today_kst().strftime("%Y%m%d")


def _apply_header_style(ws, row: int, col_count: int) -> None:
    for col in range(1, col_count + 1):
        cell = ws.cell(row=row, column=col)
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)


def build_workbook(sheet_title: str, columns, rows) -> io.BytesIO:
    """One styled sheet: header row, fixed widths, bordered data rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title

    ws.append([title for title, _ in columns])
    _apply_header_style(ws, 1, len(columns))
    for index, (_, width) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(index)].width = width

    for row in rows:
        ws.append(row)
        for cell in ws[ws.max_row]:
            cell.border = THIN_BORDER
            cell.alignment = Alignment(vertical="top", wrap_text=True)
    ws.freeze_panes = "A2"

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return buf


def _names(ids, names) -> str:
    return ", ".join(names.get(i, i) for i in split_csv(ids))


# ── Projects ────────────────────────────────────────────────────────────


def export_projects(user_id: str, params: dict):
    fav_ids = favorite_project_ids(user_id) if params.get("favorites") else None
    projects = filter_projects(
        get_store().get_all_as_objects(SHEET_NAMES.PROJECTS),
        search=params.get("search") or "",
        status=params.get("status"),
        division=params.get("division"),
        stage=params.get("stage"),
        project_ids=fav_ids,
    )
    projects.sort(key=lambda p: p.get("createdAt", ""), reverse=True)
    names = user_name_map()

    rows = [
        [
            i, p.get("status", ""), p.get("customer", ""), p.get("item", ""),
            p.get("partNo", ""), p.get("division", ""), p.get("category", ""),
            p.get("model", ""), names.get(p.get("teamLeaderId"), p.get("teamLeaderId", "")),
            _names(p.get("teamMembers"), names), p.get("currentStage", ""),
            p.get("scheduleStart", ""), p.get("scheduleEnd", ""), p.get("note", ""),
        ]
        for i, p in enumerate(projects, start=1)
    ]
    logger.info("Project export: %d rows", len(rows))
    return build_workbook("프로젝트목록", PROJECT_COLUMNS, rows), f"프로젝트목록_{_stamp()}.xlsx"


# ── Schedules ───────────────────────────────────────────────────────────


def export_gantt(user_id: str, params: dict):
    fav_ids = favorite_project_ids(user_id) if params.get("favorites") else None
    projects = filter_projects(
        get_store().get_all_as_objects(SHEET_NAMES.PROJECTS),
        status=params.get("status"),
        division=params.get("division"),
        project_ids=fav_ids,
    )
    projects.sort(key=lambda p: p.get("scheduleStart", ""))
    names = user_name_map()

    rows = [
        [
            i, p["id"], p.get("status", ""), p.get("customer", ""), p.get("item", ""),
            p.get("division", ""), p.get("category", ""),
            names.get(p.get("teamLeaderId"), p.get("teamLeaderId", "")),
            p.get("currentStage", ""), p.get("scheduleStart", ""), p.get("scheduleEnd", ""),
        ]
        for i, p in enumerate(projects, start=1)
    ]
    return build_workbook("전체일정", GANTT_COLUMNS, rows), f"전체일정표_{_stamp()}.xlsx"


def export_schedule_detail(project_id: str = ""):
    schedules = get_store().get_all_as_objects(SHEET_NAMES.PROJECT_SCHEDULES)
    if project_id:
        schedules = [s for s in schedules if s.get("projectId") == project_id]
    schedules.sort(key=lambda s: (s.get("projectId", ""), to_int(s.get("order"))))
    projects = project_map()

    rows = []
    for i, s in enumerate(schedules, start=1):
        project = projects.get(s.get("projectId"))
        label = f"{project.get('customer', '')} - {project.get('item', '')}" if project else s.get("projectId", "")
        rows.append([
            i, label, s.get("stage", ""), s.get("taskName", ""),
            s.get("plannedStart", ""), s.get("plannedEnd", ""),
            s.get("actualStart", ""), s.get("actualEnd", ""),
            RESPONSIBILITY_LABELS.get(s.get("responsibility"), s.get("responsibility", "")),
            s.get("category", ""),
            SCHEDULE_STATUS_LABELS.get(s.get("status"), s.get("status", "")),
            s.get("note", ""),
        ])

    if project_id:
        project = projects.get(project_id)
        name = f"{project.get('customer', '')}_{project.get('item', '')}" if project else project_id
        filename = f"일정표_{_UNSAFE_FILENAME_CHARS.sub('_', name)}_{_stamp()}.xlsx"
    else:
        filename = f"세부추진항목_{_stamp()}.xlsx"
    return build_workbook("세부추진항목", SCHEDULE_COLUMNS, rows), filename


# ── Worklogs ────────────────────────────────────────────────────────────


def export_worklogs(params: dict):
    logs = filter_worklogs(
        get_store().get_all_as_objects(SHEET_NAMES.WORKLOGS),
        start_date=params.get("startDate") or "",
        end_date=params.get("endDate") or "",
        project_id=params.get("projectId") or "",
        assignee_id=params.get("assigneeId") or "",
        stage=params.get("stage") or "",
        keyword=params.get("keyword") or "",
        keyword_fields=("content", "plan", "issue"),
    )
    sort_newest_first(logs)
    names = user_name_map()

    rows = []
    for i, w in enumerate(logs, start=1):
        issue_state = ""
        if w.get("issueStatus") == ISSUE_RESOLVED:
            issue_state = ISSUE_STATUS_LABELS[ISSUE_RESOLVED]
        elif w.get("issue"):
            issue_state = ISSUE_STATUS_LABELS[ISSUE_OPEN]
        rows.append([
            i, w.get("date", ""), w.get("item", ""), w.get("customer", ""), w.get("stage", ""),
            names.get(w.get("assigneeId"), w.get("assigneeId", "")),
            _names(w.get("participants"), names),
            w.get("plan", ""), w.get("content", ""), w.get("issue", ""), issue_state,
        ])
    logger.info("Worklog export: %d rows", len(rows))
    return build_workbook("업무일지", WORKLOG_COLUMNS, rows), f"업무일지_{_stamp()}.xlsx"
