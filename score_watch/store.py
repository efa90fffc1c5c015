from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from score_watch.errors import StoreError
from score_watch.settings import WatchSettings


SCHEMA_VERSION = 1


@dataclass(frozen=True)
class Observation:
    """
    Notify-relevant summary of the tracked game.

    Only brief_text takes part in change detection; text and captured_at are carried for display.
    id is the store slot the observation lives in, None until persisted.
    """

    text: str
    brief_text: str
    captured_at: float
    id: int | None = None


def _connect(path: str) -> sqlite3.Connection:
    p = str(path or "").strip()
    if not p:
        raise StoreError("Missing db_path")
    try:
        Path(p).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(p, timeout=30, isolation_level=None, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout = 5000;")
    except (sqlite3.Error, OSError) as exc:
        raise StoreError(f"Cannot open observation store {p}: {exc}") from exc
    return conn


def ensure_schema(settings: WatchSettings) -> None:
    conn = _connect(settings.db_path)
    try:
        _ensure_schema_conn(conn)
    except sqlite3.Error as exc:
        raise StoreError(f"Schema setup failed: {exc}") from exc
    finally:
        conn.close()


def _ensure_schema_conn(conn: sqlite3.Connection) -> None:
    conn.execute("CREATE TABLE IF NOT EXISTS schema_meta (k TEXT PRIMARY KEY, v TEXT NOT NULL);")
    row = conn.execute("SELECT v FROM schema_meta WHERE k='version'").fetchone()
    cur = int(row["v"]) if row and row["v"] else 0
    if cur >= SCHEMA_VERSION:
        return

    if cur == 0:
        _apply_v1(conn)
        conn.execute("INSERT OR REPLACE INTO schema_meta (k, v) VALUES ('version', ?)", (str(SCHEMA_VERSION),))
        return

    raise RuntimeError(f"Unsupported schema version upgrade path cur={cur} target={SCHEMA_VERSION}")


def _apply_v1(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS observations (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          scope TEXT NOT NULL,
          text TEXT NOT NULL,
          brief_text TEXT NOT NULL,
          captured_at_ts REAL NOT NULL
        );
        """
    )
    conn.execute(
        "CREATE INDEX IF NOT EXISTS idx_observations_scope_captured ON observations(scope, captured_at_ts DESC);"
    )


def _row_to_observation(row: sqlite3.Row) -> Observation:
    return Observation(
        text=str(row["text"]),
        brief_text=str(row["brief_text"]),
        captured_at=float(row["captured_at_ts"]),
        id=int(row["id"]),
    )


def recent_observations(settings: WatchSettings, *, scope: str, limit: int = 1) -> list[Observation]:
    conn = _connect(settings.db_path)
    try:
        _ensure_schema_conn(conn)
        rows = conn.execute(
            """
            SELECT id, text, brief_text, captured_at_ts
            FROM observations
            WHERE scope=?
            ORDER BY captured_at_ts DESC, id DESC
            LIMIT ?
            """,
            (scope, max(1, int(limit))),
        ).fetchall()
        return [_row_to_observation(r) for r in rows]
    except sqlite3.Error as exc:
        raise StoreError(f"Reading observations for scope={scope} failed: {exc}") from exc
    finally:
        conn.close()


def latest_observation(settings: WatchSettings, *, scope: str) -> Observation | None:
    items = recent_observations(settings, scope=scope, limit=1)
    return items[0] if items else None


def record_observation(
    settings: WatchSettings,
    *,
    scope: str,
    observation: Observation,
    slot_key: int | None,
) -> Observation:
    """
    Persist an observation as the newest entry for scope.

    With slot_key the existing row is overwritten in place and keeps its id; without it a new row is
    inserted. The connection autocommits, so the write is durable once this returns.
    """
    conn = _connect(settings.db_path)
    try:
        _ensure_schema_conn(conn)
        if slot_key is None:
            cur = conn.execute(
                "INSERT INTO observations (scope, text, brief_text, captured_at_ts) VALUES (?, ?, ?, ?)",
                (scope, observation.text, observation.brief_text, float(observation.captured_at)),
            )
            new_id = int(cur.lastrowid)
        else:
            cur = conn.execute(
                """
                UPDATE observations
                SET text=?, brief_text=?, captured_at_ts=?
                WHERE id=? AND scope=?
                """,
                (observation.text, observation.brief_text, float(observation.captured_at), int(slot_key), scope),
            )
            if cur.rowcount != 1:
                raise StoreError(f"No observation slot id={slot_key} for scope={scope}")
            new_id = int(slot_key)
    except sqlite3.Error as exc:
        raise StoreError(f"Writing observation for scope={scope} failed: {exc}") from exc
    finally:
        conn.close()

    return Observation(
        text=observation.text,
        brief_text=observation.brief_text,
        captured_at=float(observation.captured_at),
        id=new_id,
    )
