"""
Credential Store.
Keeps the bearer token in a local SQLite file so it survives restarts.
"""
import sqlite3
import logging
import os
from typing import Optional, Tuple, List, Dict

from ..config import settings

logger = logging.getLogger(__name__)


class CredentialStore:
    """Origin-scoped key/value storage for a single bearer token."""

    def __init__(
        self,
        db_path: Optional[str] = None,
        origin: Optional[str] = None,
        key: Optional[str] = None
    ):
        self.db_path = str(db_path or settings.credential_db_path)
        self.origin = (origin or settings.api_base_url).rstrip("/")
        self.key = key or settings.token_storage_key
        self._ensure_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Create a database connection, creating the parent directory if needed."""
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _execute(self, query: str, args: Tuple = ()) -> List[Dict]:
        """Run a statement in its own transaction and return any rows."""
        conn = self._get_connection()
        try:
            with conn:
                rows = conn.execute(query, args).fetchall()
            return [dict(row) for row in rows]
        finally:
            conn.close()

    def _ensure_schema(self):
        try:
            self._execute(
                "CREATE TABLE IF NOT EXISTS credentials ("
                " origin TEXT NOT NULL,"
                " key TEXT NOT NULL,"
                " value TEXT NOT NULL,"
                " PRIMARY KEY (origin, key))"
            )
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Could not prepare credential store at {self.db_path}: {e}")

    def save(self, token: str):
        """Persist the token, replacing any previous one."""
        try:
            self._execute(
                "INSERT OR REPLACE INTO credentials (origin, key, value) VALUES (?, ?, ?)",
                (self.origin, self.key, token),
            )
            logger.debug(f"Stored credentials for {self.origin}")
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to store credentials: {e}")

    def load(self) -> Optional[str]:
        """Return the stored token, or None when there is none."""
        try:
            rows = self._execute(
                "SELECT value FROM credentials WHERE origin = ? AND key = ? LIMIT 1",
                (self.origin, self.key),
            )
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to read credentials: {e}")
            return None
        if not rows or not rows[0]["value"]:
            return None
        return rows[0]["value"]

    def clear(self):
        """Forget the stored token."""
        try:
            self._execute(
                "DELETE FROM credentials WHERE origin = ? AND key = ?",
                (self.origin, self.key),
            )
        except (sqlite3.Error, OSError) as e:
            logger.error(f"Failed to clear credentials: {e}")
