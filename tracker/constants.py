"""Domain vocabulary shared by services, exports and tests."""

# Project status
STATUS_ACTIVE = "진행중"
STATUS_HOLD = "보류"
STATUS_DONE = "완료"
PROJECT_STATUSES = (STATUS_ACTIVE, STATUS_HOLD, STATUS_DONE)

# The 14 development stages, in order
STAGES = (
    "검토", "설계", "개발", "PROTO", "신뢰성", "P1", "P2",
    "승인", "양산이관", "초도양산", "품질관리", "원가절감", "품질개선", "설계변경",
)
DEFAULT_STAGE = STAGES[0]

DIVISIONS = ("전장", "유압", "기타")
CATEGORIES = ("농기", "중공업", "해외", "기타")
DEFAULT_DIVISION = "전장"
DEFAULT_CATEGORY = "기타"

# Schedule items
SCHEDULE_PLANNED = "planned"
SCHEDULE_IN_PROGRESS = "in_progress"
SCHEDULE_COMPLETED = "completed"
SCHEDULE_DELAYED = "delayed"
SCHEDULE_STATUSES = (SCHEDULE_PLANNED, SCHEDULE_IN_PROGRESS, SCHEDULE_COMPLETED, SCHEDULE_DELAYED)

SCHEDULE_STATUS_LABELS = {
    SCHEDULE_PLANNED: "예정",
    SCHEDULE_IN_PROGRESS: "진행중",
    SCHEDULE_COMPLETED: "완료",
    SCHEDULE_DELAYED: "지연",
}
RESPONSIBILITY_LABELS = {"lead": "주관", "support": "협조"}

# Worklog issues
ISSUE_OPEN = "open"
ISSUE_RESOLVED = "resolved"

# Derived project health
HEALTH_NORMAL = "normal"
HEALTH_DELAYED = "delayed"
HEALTH_COMPLETED = "completed"

# Expected-vs-actual progress gap (percentage points) before a project is "delayed"
DELAY_THRESHOLD = 10
