"""
Sheet names and header layouts.

Row 1 of every sheet holds these headers; data starts at row 2.  The
in-memory backend is seeded from this table, and ``flask init-sheets``
creates any missing worksheet on the spreadsheet with the same headers.
"""


class SHEET_NAMES:
    USERS = "Users"
    PROJECTS = "Projects"
    WORKLOGS = "WorkLogs"
    WEEKLY_REPORTS = "WeeklyReports"
    WEEKLY_REPORT_NOTICES = "WeeklyReportNotices"
    PROJECT_SCHEDULES = "ProjectSchedules"
    PROJECT_HISTORY = "ProjectHistory"
    FAVORITES = "Favorites"
    COMMENTS = "Comments"
    MEETING_MINUTES = "MeetingMinutes"
    SAVED_SEARCHES = "SavedSearches"
    CUSTOMERS = "Customers"
    MODELS = "Models"
    SETTINGS = "Settings"


SHEET_HEADERS: dict[str, list[str]] = {
    SHEET_NAMES.USERS: [
        "id", "password", "name", "email", "role", "division",
        "isActive", "createdAt", "updatedAt",
    ],
    SHEET_NAMES.PROJECTS: [
        "id", "status", "customer", "division", "category", "model", "item",
        "partNo", "teamLeaderId", "teamMembers", "currentStage", "stages",
        "stageHistory", "progress", "issues", "scheduleStart", "scheduleEnd",
        "note", "createdAt", "updatedAt",
    ],
    SHEET_NAMES.PROJECT_SCHEDULES: [
        "id", "projectId", "stage", "taskName", "category", "responsibility",
        "plannedStart", "plannedEnd", "actualStart", "actualEnd", "status",
        "note", "order",
    ],
    SHEET_NAMES.PROJECT_HISTORY: [
        "id", "projectId", "changedField", "oldValue", "newValue",
        "changedById", "changedAt",
    ],
    SHEET_NAMES.WORKLOGS: [
        "id", "date", "projectId", "item", "customer", "stage", "assigneeId",
        "participants", "plan", "content", "issue", "issueStatus",
        "issueResolvedAt", "scheduleId", "createdAt", "updatedAt",
    ],
    SHEET_NAMES.WEEKLY_REPORTS: [
        "id", "year", "month", "week", "weekStart", "weekEnd", "categoryId",
        "customer", "item", "projectId", "content", "order", "createdById",
        "createdAt", "updatedAt", "isIncluded", "isDeleted",
    ],
    SHEET_NAMES.WEEKLY_REPORT_NOTICES: [
        "id", "year", "month", "week", "content", "createdById",
        "createdAt", "updatedAt",
    ],
    SHEET_NAMES.FAVORITES: ["id", "userId", "projectId", "createdAt"],
    SHEET_NAMES.COMMENTS: [
        "id", "projectId", "authorId", "parentId", "content", "createdAt",
    ],
    SHEET_NAMES.MEETING_MINUTES: [
        "id", "projectId", "title", "hostDepartment", "location",
        "meetingDate", "attendeesJson", "agenda", "discussion", "decisions",
        "nextSteps", "createdById", "createdAt", "updatedAt",
    ],
    SHEET_NAMES.SAVED_SEARCHES: ["id", "userId", "name", "filtersJson", "createdAt"],
    SHEET_NAMES.CUSTOMERS: ["id", "name", "order", "isActive", "createdAt", "updatedAt"],
    SHEET_NAMES.MODELS: ["id", "name", "order", "isActive", "createdAt", "updatedAt"],
    SHEET_NAMES.SETTINGS: ["key", "value", "updatedAt", "updatedBy"],
}
