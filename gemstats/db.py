from __future__ import annotations
import sqlite3
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

SCHEMA_VERSION = 1

_DB_CONN: sqlite3.Connection | None = None
_DB_PATH: Path | None = None


def _dict_factory(cursor, row):
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def get_conn(db_path: Path | None = None) -> sqlite3.Connection:
    global _DB_CONN, _DB_PATH
    if _DB_CONN is not None:
        return _DB_CONN
    if db_path is None:
        # Lazy fallback to configured DB file to avoid import-order issues
        try:
            from .config import settings  # local import to avoid circulars at module import time
            db_path = Path(settings.db_file)
        except Exception as e:
            raise RuntimeError("DB not initialized and no settings available. Call init_db(db_path) first.") from e
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = _dict_factory
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    conn.execute("PRAGMA foreign_keys=ON;")
    _DB_CONN = conn
    _DB_PATH = db_path
    _apply_migrations(conn)
    return conn


def init_db(db_path: Path) -> None:
    """Initialize global connection and create tables if missing."""
    get_conn(db_path)


def close_db() -> None:
    global _DB_CONN, _DB_PATH
    if _DB_CONN is not None:
        try:
            _DB_CONN.close()
        finally:
            _DB_CONN = None
            _DB_PATH = None


def _now_str_utc() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).strftime("%Y-%m-%d %H:%M:%S")


def _today_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def _apply_migrations(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS _meta (
            key TEXT PRIMARY KEY,
            value TEXT
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS rubygems (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%S','now'))
        );
        """
    )
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS versions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            rubygem_id INTEGER NOT NULL REFERENCES rubygems(id) ON DELETE CASCADE,
            number TEXT NOT NULL,
            platform TEXT NOT NULL DEFAULT 'ruby',
            full_name TEXT UNIQUE NOT NULL,
            indexed INTEGER NOT NULL DEFAULT 1,
            prerelease INTEGER NOT NULL DEFAULT 0,
            summary TEXT,
            description TEXT,
            authors TEXT,
            built_at TEXT,
            created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%d %H:%M:%S','now'))
        );
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_versions_rubygem ON versions (rubygem_id);")
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS downloads (
            rubygem_name TEXT NOT NULL,
            full_name TEXT NOT NULL,
            day TEXT NOT NULL,
            count INTEGER NOT NULL DEFAULT 0,
            PRIMARY KEY (full_name, day)
        );
        """
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_downloads_rubygem ON downloads (rubygem_name);")
    conn.execute("CREATE INDEX IF NOT EXISTS idx_downloads_day ON downloads (day);")

    conn.execute(
        "INSERT OR REPLACE INTO _meta (key, value) VALUES ('schema_version', ?);",
        (str(SCHEMA_VERSION),),
    )
    conn.commit()


def full_name_for(name: str, number: str, platform: str = "ruby") -> str:
    if platform and platform != "ruby":
        return f"{name}-{number}-{platform}"
    return f"{name}-{number}"


# Registry API

def create_rubygem(name: str) -> dict[str, Any]:
    conn = get_conn()
    conn.execute("INSERT OR IGNORE INTO rubygems (name, created_at) VALUES (?, ?)", (name, _now_str_utc()))
    conn.commit()
    return find_rubygem_by_name(name)


def find_rubygem_by_name(name: str) -> Optional[dict[str, Any]]:
    conn = get_conn()
    cur = conn.execute("SELECT id, name, created_at FROM rubygems WHERE name=?", (name,))
    return cur.fetchone()


def create_version(
    rubygem_name: str,
    number: str,
    *,
    platform: str = "ruby",
    indexed: bool = True,
    prerelease: bool = False,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    authors: Optional[Iterable[str]] = None,
    built_at: Optional[str] = None,
    created_at: Optional[str] = None,
) -> dict[str, Any]:
    """Insert a version, creating its rubygem on first use.
    - authors: stored comma-separated
    - created_at: defaults to now (UTC); drives recency ordering
    """
    rubygem = create_rubygem(rubygem_name)
    full_name = full_name_for(rubygem_name, number, platform)
    conn = get_conn()
    conn.execute(
        """
        INSERT INTO versions (rubygem_id, number, platform, full_name, indexed, prerelease,
                              summary, description, authors, built_at, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            rubygem["id"],
            number,
            platform,
            full_name,
            1 if indexed else 0,
            1 if prerelease else 0,
            summary,
            description,
            ", ".join(authors) if authors else None,
            built_at,
            created_at or _now_str_utc(),
        ),
    )
    conn.commit()
    return find_version(full_name)


def find_version(full_name: str) -> Optional[dict[str, Any]]:
    conn = get_conn()
    cur = conn.execute(
        """
        SELECT v.*, r.name AS rubygem_name
        FROM versions v JOIN rubygems r ON r.id = v.rubygem_id
        WHERE v.full_name=?
        """,
        (full_name,),
    )
    return cur.fetchone()


def rubygem_name_for(full_name: str) -> Optional[str]:
    row = find_version(full_name)
    return row["rubygem_name"] if row else None


def public_versions(rubygem_id: int) -> list[dict[str, Any]]:
    """Indexed versions of a rubygem, most recent first."""
    conn = get_conn()
    cur = conn.execute(
        """
        SELECT v.*, r.name AS rubygem_name
        FROM versions v JOIN rubygems r ON r.id = v.rubygem_id
        WHERE v.rubygem_id=? AND v.indexed=1
        ORDER BY v.created_at DESC, v.id DESC
        """,
        (rubygem_id,),
    )
    return cur.fetchall()


# Download counter API

def incr(rubygem_name: str, full_name: str, day: Optional[date | str] = None, by: int = 1) -> None:
    conn = get_conn()
    day_txt = day.isoformat() if isinstance(day, date) else (day or _today_utc())
    conn.execute(
        """
        INSERT INTO downloads (rubygem_name, full_name, day, count)
        VALUES (?, ?, ?, ?)
        ON CONFLICT(full_name, day) DO UPDATE SET count = downloads.count + excluded.count
        ;
        """,
        (rubygem_name, full_name, day_txt, by),
    )
    conn.commit()


def count() -> int:
    conn = get_conn()
    row = conn.execute("SELECT COALESCE(SUM(count), 0) AS total FROM downloads").fetchone()
    return int(row["total"])


def for_rubygem(rubygem_name: str) -> int:
    conn = get_conn()
    row = conn.execute(
        "SELECT COALESCE(SUM(count), 0) AS total FROM downloads WHERE rubygem_name=?",
        (rubygem_name,),
    ).fetchone()
    return int(row["total"])


def for_version(full_name: str) -> int:
    conn = get_conn()
    row = conn.execute(
        "SELECT COALESCE(SUM(count), 0) AS total FROM downloads WHERE full_name=?",
        (full_name,),
    ).fetchone()
    return int(row["total"])


def for_versions(full_names: Iterable[str]) -> dict[str, int]:
    """Lifetime counts for several versions in one query; unknown names map to 0."""
    names = list(dict.fromkeys(full_names))
    if not names:
        return {}
    conn = get_conn()
    counts = {name: 0 for name in names}
    # Chunked to stay under sqlite's bound-parameter limit
    for start in range(0, len(names), 500):
        chunk = names[start:start + 500]
        placeholders = ", ".join("?" for _ in chunk)
        cur = conn.execute(
            f"SELECT full_name, SUM(count) AS total FROM downloads WHERE full_name IN ({placeholders}) GROUP BY full_name",
            chunk,
        )
        for row in cur.fetchall():
            counts[row["full_name"]] = int(row["total"])
    return counts


def most_downloaded_today(limit: int = 50, day: Optional[date | str] = None) -> list[tuple[dict[str, Any], int]]:
    """Return (version row, today's count) pairs, highest count first.
    Counters whose full name no longer resolves to a version are skipped.
    """
    conn = get_conn()
    day_txt = day.isoformat() if isinstance(day, date) else (day or _today_utc())
    cur = conn.execute(
        """
        SELECT v.*, r.name AS rubygem_name, d.count AS today_count
        FROM downloads d
        JOIN versions v ON v.full_name = d.full_name
        JOIN rubygems r ON r.id = v.rubygem_id
        WHERE d.day=?
        ORDER BY d.count DESC, d.full_name ASC
        LIMIT ?
        """,
        (day_txt, max(1, limit)),
    )
    pairs = []
    for row in cur.fetchall():
        today_count = int(row.pop("today_count"))
        pairs.append((row, today_count))
    return pairs
