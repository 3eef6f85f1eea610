"""Review recording and due-item queries on top of the SM-2 scheduler."""
import logging
import random
import sqlite3
from typing import Optional

from flashdeck.db import get_connection
from flashdeck.models import ItemSchedule, ReviewLogEntry, ReviewState
from flashdeck.sm2 import MATURE_STEP, PASSING_GRADE, SchedulerConfig, now_millis, review

logger = logging.getLogger(__name__)


def _row_to_state(row: sqlite3.Row) -> ReviewState:
    return ReviewState(
        interval_days=row["interval_days"],
        ease=row["ease"],
        step=row["step"],
        due_at=row["due_at"],
        last_grade=row["last_grade"],
    )


def get_state(db_path: str, item_id: int) -> ReviewState | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT * FROM review_state WHERE item_id = ?", (item_id,)).fetchone()
    conn.close()
    return _row_to_state(row) if row else None


def record_review(
    db_path: str,
    item_id: int,
    grade: int,
    now: Optional[int] = None,
    config: Optional[SchedulerConfig] = None,
    rng: Optional[random.Random] = None,
) -> ReviewState:
    """Grade an item, store its new state and append a log entry.

    The prior state is read and the new state and log written under one
    write lock, so concurrent gradings of an item apply one after another.
    """
    if now is None:
        now = now_millis()
    conn = get_connection(db_path)
    try:
        with conn:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute("SELECT * FROM review_state WHERE item_id = ?", (item_id,)).fetchone()
            prior = _row_to_state(row) if row else None
            state = review(prior, grade, now, config, rng)
            entry = ReviewLogEntry.from_review(item_id, now, state)
            conn.execute(
                """INSERT INTO review_state (item_id, interval_days, ease, step, due_at, last_grade)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(item_id) DO UPDATE SET interval_days=excluded.interval_days,
                    ease=excluded.ease, step=excluded.step, due_at=excluded.due_at,
                    last_grade=excluded.last_grade""",
                (item_id, state.interval_days, state.ease, state.step, state.due_at, state.last_grade),
            )
            conn.execute(
                """INSERT INTO review_log (item_id, reviewed_at, grade, interval_days, ease, step)
                VALUES (?, ?, ?, ?, ?, ?)""",
                (entry.item_id, entry.reviewed_at, entry.grade, entry.interval_days, entry.ease, entry.step),
            )
    finally:
        conn.close()
    logger.info("item %s graded %s, next due at %s", item_id, state.last_grade, state.due_at)
    return state


def get_due_items(db_path: str, now: Optional[int] = None, limit: int = 20) -> list[int]:
    if now is None:
        now = now_millis()
    conn = get_connection(db_path)
    rows = conn.execute(
        """SELECT item_id FROM review_state
        WHERE due_at <= ? AND suspended = 0
        ORDER BY due_at ASC, item_id ASC
        LIMIT ?""",
        (now, limit),
    ).fetchall()
    conn.close()
    return [r["item_id"] for r in rows]


def get_review_log(db_path: str, item_id: int) -> list[ReviewLogEntry]:
    conn = get_connection(db_path)
    rows = conn.execute(
        "SELECT * FROM review_log WHERE item_id = ? ORDER BY reviewed_at ASC, id ASC",
        (item_id,),
    ).fetchall()
    conn.close()
    return [
        ReviewLogEntry(
            item_id=r["item_id"],
            reviewed_at=r["reviewed_at"],
            grade=r["grade"],
            interval_days=r["interval_days"],
            ease=r["ease"],
            step=r["step"],
        )
        for r in rows
    ]


def get_item_schedule(db_path: str, item_id: int) -> ItemSchedule | None:
    conn = get_connection(db_path)
    row = conn.execute(
        """SELECT s.*, (SELECT COUNT(*) FROM review_log l WHERE l.item_id = s.item_id) AS total_reviews
        FROM review_state s WHERE s.item_id = ?""",
        (item_id,),
    ).fetchone()
    conn.close()
    if not row:
        return None
    return ItemSchedule(
        item_id=row["item_id"],
        ease=row["ease"],
        interval_days=row["interval_days"],
        step=row["step"],
        due_at=row["due_at"],
        last_grade=row["last_grade"],
        total_reviews=row["total_reviews"],
        suspended=bool(row["suspended"]),
    )


def suspend_item(db_path: str, item_id: int, suspended: bool = True) -> bool:
    """Keep a graded item out of due queries without touching its schedule.

    Returns False if the item has never been graded.
    """
    conn = get_connection(db_path)
    cur = conn.execute(
        "UPDATE review_state SET suspended = ? WHERE item_id = ?",
        (1 if suspended else 0, item_id),
    )
    updated = cur.rowcount > 0
    conn.commit()
    conn.close()
    return updated


def reset_item(db_path: str, item_id: int) -> None:
    """Forget an item's schedule so its next review starts fresh. The log is kept."""
    conn = get_connection(db_path)
    conn.execute("DELETE FROM review_state WHERE item_id = ?", (item_id,))
    conn.commit()
    conn.close()


def get_review_stats(db_path: str, now: Optional[int] = None) -> dict:
    if now is None:
        now = now_millis()
    conn = get_connection(db_path)
    log = conn.execute(
        "SELECT COUNT(*) as t, SUM(CASE WHEN grade >= ? THEN 1 ELSE 0 END) as c FROM review_log",
        (PASSING_GRADE,),
    ).fetchone()
    states = conn.execute(
        """SELECT COUNT(*) as items,
            SUM(CASE WHEN step >= ? THEN 1 ELSE 0 END) as mature,
            SUM(CASE WHEN due_at <= ? AND suspended = 0 THEN 1 ELSE 0 END) as due,
            SUM(suspended) as suspended
        FROM review_state""",
        (MATURE_STEP, now),
    ).fetchone()
    conn.close()
    items = states["items"]
    mature = states["mature"] or 0
    return {
        "reviews": log["t"],
        "retention": round((log["c"] / log["t"]) * 100, 1) if log["t"] else 0.0,
        "items": items,
        "learning": items - mature,
        "mature": mature,
        "due": states["due"] or 0,
        "suspended": states["suspended"] or 0,
    }
