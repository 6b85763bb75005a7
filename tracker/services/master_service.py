"""
Master Data Service — the Customers and Models pick lists.

Both sheets share one layout (id, name, order, isActive, createdAt,
updatedAt), so every operation takes a ``kind`` key from MASTER_KINDS.
Inactive rows are hidden from lists and ignored for ordering.
"""

import logging

from tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, to_bool, to_int

logger = logging.getLogger(__name__)

MASTER_KINDS = {
    "customers": {"sheet": SHEET_NAMES.CUSTOMERS, "prefix": "CUS-", "label": "Customer"},
    "models": {"sheet": SHEET_NAMES.MODELS, "prefix": "MOD-", "label": "Model"},
}

INITIAL_CUSTOMERS = [
    "KIA", "한화에어로스페이스", "마루이앤지", "HMC", "TTDW모빌리티", "KOBELCO",
    "KOMATSU", "HITACHI", "HITACHI Tierra", "SUMITOMO", "자체", "현대인프라코어",
    "현대사이트솔루션", "YAMADA", "타케우치", "하이드로텍", "대동", "대동기어", "TYM",
    "렌드솔루션", "KUBOTA", "DORMAN", "WEXCO", "ROCA", "AME", "YANMAR(SPK)",
    "LS엠트론", "삼우농기(대동)", "HDX", "HKMC", "TDVC", "KAMS", "기아군수",
    "대동모빌리티", "볼보건설기계", "현대건설기계", "ISEKI",
]

INITIAL_MODELS = [
    "CAB TILT SYSTEM", "FUEL FILLER PUMP", "PUMP", "CYLINDER", "ETB",
    "TC ACTUATOR MOTOR", "MOTOR", "OUTLIGGER", "스트로크 실린더", "HST 구동 모터",
    "CAT-2 실린더 확대적용 검토", "ABH16", "AIR BLOWER", "BLDC MOTOR", "DC MOTOR",
    "빙수기", "TURBO CHARGER", "MOTORHOME", "MAGNETIC VALVE", "검사기",
    "도면, 서류 관리", "기타업무", "협력로봇",
]


def _kind(kind: str) -> dict:
    if kind not in MASTER_KINDS:
        raise NotFoundError("MasterData", kind)
    return MASTER_KINDS[kind]


def _to_response(row: dict) -> dict:
    return {
        "id": row.get("id", ""),
        "name": row.get("name", ""),
        "order": to_int(row.get("order")),
        "isActive": to_bool(row.get("isActive"), default=True),
        "createdAt": row.get("createdAt", ""),
        "updatedAt": row.get("updatedAt", ""),
    }


def _active_rows(sheet):
    rows = [
        m for m in get_store().get_all_with_index(sheet)
        if to_bool(m.data.get("isActive"), default=True) and m.data.get("name")
    ]
    rows.sort(key=lambda m: to_int(m.data.get("order")))
    return rows


def list_entries(kind: str) -> list[dict]:
    return [_to_response(m.data) for m in _active_rows(_kind(kind)["sheet"])]


def add_entry(kind: str, name) -> dict:
    meta = _kind(kind)
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ValidationError("name is required")

    store = get_store()
    with store.lock(meta["sheet"]):
        rows = store.get_all_as_objects(meta["sheet"])
        if any(r.get("name") == name and to_bool(r.get("isActive"), default=True) for r in rows):
            raise ConflictError(meta["label"], "name", name)
        next_order = max((to_int(r.get("order")) for r in rows), default=0) + 1
        now = now_iso()
        entry = store.allocate_and_append(
            meta["sheet"],
            meta["prefix"],
            lambda new_id: {
                "id": new_id,
                "name": name,
                "order": next_order,
                "isActive": True,
                "createdAt": now,
                "updatedAt": now,
            },
        )
    logger.info("%s %s added (%s)", meta["label"], entry["id"], name)
    return _to_response(entry)


def move_entry(kind: str, entry_id: str, direction: str) -> None:
    """Swap ``order`` with the adjacent active entry."""
    meta = _kind(kind)
    if not entry_id or direction not in ("up", "down"):
        raise ValidationError("id and direction ('up' or 'down') are required")

    store = get_store()
    with store.lock(meta["sheet"]):
        rows = _active_rows(meta["sheet"])
        pos = next((i for i, m in enumerate(rows) if m.data["id"] == entry_id), None)
        if pos is None:
            raise NotFoundError(meta["label"], entry_id)
        target = pos - 1 if direction == "up" else pos + 1
        if target < 0 or target >= len(rows):
            raise ValidationError(f"Cannot move {direction}: already at the edge")

        now = now_iso()
        current, other = dict(rows[pos].data), dict(rows[target].data)
        current["order"], other["order"] = other.get("order"), current.get("order")
        current["updatedAt"] = other["updatedAt"] = now
        store.update_object(meta["sheet"], rows[pos].row_index, current)
        store.update_object(meta["sheet"], rows[target].row_index, other)


def set_entry_order(kind: str, entry_id: str, new_order) -> None:
    """Move an entry to 1-based position ``new_order`` and renumber the rest."""
    meta = _kind(kind)
    store = get_store()
    with store.lock(meta["sheet"]):
        rows = _active_rows(meta["sheet"])
        pos = next((i for i, m in enumerate(rows) if m.data["id"] == entry_id), None)
        if pos is None:
            raise NotFoundError(meta["label"], entry_id)
        target = max(1, min(to_int(new_order, 1), len(rows))) - 1
        if target == pos:
            return
        rows.insert(target, rows.pop(pos))

        now = now_iso()
        for order, match in enumerate(rows, start=1):
            if to_int(match.data.get("order")) == order:
                continue
            row = dict(match.data)
            row["order"] = order
            row["updatedAt"] = now
            store.update_object(meta["sheet"], match.row_index, row)


def delete_entry(kind: str, entry_id: str) -> None:
    meta = _kind(kind)
    if not entry_id:
        raise ValidationError("id is required")
    store = get_store()
    with store.lock(meta["sheet"]):
        match = store.find_row_by_column(meta["sheet"], "id", entry_id)
        if not match:
            raise NotFoundError(meta["label"], entry_id)
        store.delete_row(meta["sheet"], match.row_index)
    logger.info("%s %s deleted", meta["label"], entry_id)


def seed_initial(force: bool = False) -> dict:
    """Fill empty Customers/Models sheets with the initial lists.

    ``force`` clears both sheets first.  Returns counts inserted per kind.
    """
    store = get_store()
    inserted = {}
    for kind, names in (("customers", INITIAL_CUSTOMERS), ("models", INITIAL_MODELS)):
        meta = MASTER_KINDS[kind]
        with store.lock(meta["sheet"]):
            if force:
                store.clear_sheet(meta["sheet"])
            elif store.get_rows(meta["sheet"]):
                inserted[kind] = 0
                continue
            now = now_iso()
            for order, name in enumerate(names, start=1):
                store.append_object(meta["sheet"], {
                    "id": f"{meta['prefix']}{order:03d}",
                    "name": name,
                    "order": order,
                    "isActive": True,
                    "createdAt": now,
                    "updatedAt": now,
                })
            inserted[kind] = len(names)
    logger.info("Master data seeded: %s (force=%s)", inserted, force)
    return inserted
