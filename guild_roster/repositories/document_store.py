# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: raw roster documents keyed by (account, document key).
Each document is a JSON list. NO business rules here — pure I/O.

Two interchangeable backends:
  * InMemoryDocumentStore — process-local, used when DATABASE_URL is empty.
  * SqlDocumentStore      — one row per document in ``roster_documents``.

``put_many`` writes every supplied document atomically.
"""

import json
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from guild_roster.core.logging import get_logger

logger = get_logger(__name__)

Document = list[dict[str, Any]]

SCHEMA_DDL = """
    CREATE TABLE IF NOT EXISTS roster_documents (
        account_id VARCHAR(255) NOT NULL,
        doc_key    VARCHAR(64)  NOT NULL,
        payload    TEXT         NOT NULL,
        updated_at VARCHAR(64)  NOT NULL,
        PRIMARY KEY (account_id, doc_key)
    )
"""


class InMemoryDocumentStore:
    """In-memory document storage, JSON-encoded so readers never share objects."""

    def __init__(self) -> None:
        self._store: dict[tuple[str, str], str] = {}
        self._lock = threading.Lock()

    # ── Read ──

    def get(self, account_id: str, key: str) -> Optional[Document]:
        with self._lock:
            raw = self._store.get((account_id, key))
        return json.loads(raw) if raw is not None else None

    def accounts(self) -> list[str]:
        with self._lock:
            return sorted({account for account, _ in self._store})

    def count(self) -> int:
        return len(self._store)

    def ping(self) -> None:
        return None

    # ── Write ──

    def put_many(self, account_id: str, documents: dict[str, Document]) -> None:
        encoded = {key: json.dumps(value) for key, value in documents.items()}
        with self._lock:
            for key, raw in encoded.items():
                self._store[(account_id, key)] = raw

    def delete_account(self, account_id: str) -> int:
        with self._lock:
            doomed = [k for k in self._store if k[0] == account_id]
            for k in doomed:
                del self._store[k]
        return len(doomed)

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._lock:
            self._store.clear()


class SqlDocumentStore:
    """SQL-backed document storage through SQLAlchemy Core."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def ensure_schema(self) -> None:
        with self._engine.begin() as conn:
            conn.execute(text(SCHEMA_DDL))
        logger.info("roster_documents table ready")

    # ── Read ──

    def get(self, account_id: str, key: str) -> Optional[Document]:
        with self._engine.connect() as conn:
            row = conn.execute(
                text("""
                    SELECT payload FROM roster_documents
                    WHERE account_id = :account_id AND doc_key = :doc_key
                """),
                {"account_id": account_id, "doc_key": key},
            ).fetchone()
        return json.loads(row[0]) if row else None

    def accounts(self) -> list[str]:
        with self._engine.connect() as conn:
            rows = conn.execute(
                text("SELECT DISTINCT account_id FROM roster_documents ORDER BY account_id")
            ).fetchall()
        return [r[0] for r in rows]

    def count(self) -> int:
        with self._engine.connect() as conn:
            return conn.execute(text("SELECT COUNT(*) FROM roster_documents")).scalar() or 0

    def ping(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    # ── Write ──

    def put_many(self, account_id: str, documents: dict[str, Document]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._engine.begin() as conn:
            for key, value in documents.items():
                conn.execute(
                    text("""
                        DELETE FROM roster_documents
                        WHERE account_id = :account_id AND doc_key = :doc_key
                    """),
                    {"account_id": account_id, "doc_key": key},
                )
                conn.execute(
                    text("""
                        INSERT INTO roster_documents (account_id, doc_key, payload, updated_at)
                        VALUES (:account_id, :doc_key, :payload, :updated_at)
                    """),
                    {"account_id": account_id, "doc_key": key,
                     "payload": json.dumps(value), "updated_at": now},
                )

    def delete_account(self, account_id: str) -> int:
        with self._engine.begin() as conn:
            result = conn.execute(
                text("DELETE FROM roster_documents WHERE account_id = :account_id"),
                {"account_id": account_id},
            )
        return result.rowcount or 0
