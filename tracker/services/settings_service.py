"""Settings Service — stage catalogue and UI settings as JSON in the Settings sheet."""

import json
import logging

from tracker.constants import CATEGORIES, DIVISIONS
from tracker.core.exceptions import ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, parse_json

logger = logging.getLogger(__name__)

_STAGE_IDS = (
    ("review", "검토"), ("design", "설계"), ("development", "개발"), ("proto", "PROTO"),
    ("reliability", "신뢰성"), ("p1", "P1"), ("p2", "P2"), ("approval", "승인"),
    ("transfer", "양산이관"), ("initial_production", "초도양산"),
    ("quality_control", "품질관리"), ("cost_reduction", "원가절감"),
    ("quality_improvement", "품질개선"), ("design_change", "설계변경"),
)

DEFAULT_STAGES = [
    {"id": sid, "name": name, "order": i, "isActive": True}
    for i, (sid, name) in enumerate(_STAGE_IDS, start=1)
]

DEFAULT_SETTINGS = {
    "itemsPerPage": 20,
    "dateFormat": "YYYY-MM-DD",
    "divisions": list(DIVISIONS),
    "categories": list(CATEGORIES),
}


def get_settings() -> dict:
    rows = {r.get("key"): r for r in get_store().get_all_as_objects(SHEET_NAMES.SETTINGS)}
    stages = parse_json((rows.get("stages") or {}).get("value"), None)
    settings = parse_json((rows.get("settings") or {}).get("value"), None)
    meta = rows.get("settings") or rows.get("stages") or {}
    return {
        "stages": stages if isinstance(stages, list) else DEFAULT_STAGES,
        "settings": settings if isinstance(settings, dict) else DEFAULT_SETTINGS,
        "updatedAt": meta.get("updatedAt") or None,
        "updatedBy": meta.get("updatedBy") or None,
    }


def save_settings(data: dict, user_id: str) -> dict:
    stages, settings = data.get("stages"), data.get("settings")
    if stages is not None and not isinstance(stages, list):
        raise ValidationError("stages must be a list")
    if settings is not None and not isinstance(settings, dict):
        raise ValidationError("settings must be an object")
    if stages is None and settings is None:
        raise ValidationError("Nothing to save (stages or settings required)")

    store = get_store()
    now = now_iso()
    with store.lock(SHEET_NAMES.SETTINGS):
        for key, value in (("stages", stages), ("settings", settings)):
            if value is None:
                continue
            row = {
                "key": key,
                "value": json.dumps(value, ensure_ascii=False),
                "updatedAt": now,
                "updatedBy": user_id,
            }
            match = store.find_row_by_column(SHEET_NAMES.SETTINGS, "key", key)
            if match:
                store.update_object(SHEET_NAMES.SETTINGS, match.row_index, row)
            else:
                store.append_object(SHEET_NAMES.SETTINGS, row)
    logger.info("Settings updated by %s", user_id)
    return get_settings()
