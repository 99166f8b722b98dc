"""Last-viewed deal, shared between the select action and the board."""

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

logger = logging.getLogger(__name__)

LAST_VIEWED_KEY = "lastViewedDealId"

ViewStateListener = Callable[[Optional[str]], None]


class ViewState:
    """
    Holds lastViewedDealId. Purely presentational: it never affects stage
    or ownership logic. With db_path set, the value survives restarts.
    """

    def __init__(self, db_path: Optional[str | Path] = None):
        self._db_path = Path(db_path) if db_path else None
        self._listeners: list[ViewStateListener] = []
        self._last_viewed: Optional[str] = None
        if self._db_path is not None:
            self._ensure_schema()
            self._last_viewed = self._read(LAST_VIEWED_KEY)

    def _connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        schema_path = Path(__file__).parent / "schema.sql"
        with self._connection() as conn:
            conn.executescript(schema_path.read_text())

    def _read(self, key: str) -> Optional[str]:
        with self._connection() as conn:
            row = conn.execute("SELECT value FROM view_state WHERE key = ?", (key,)).fetchone()
        return row["value"] if row else None

    def _write(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO view_state (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                """,
                (key, value, now),
            )
            conn.commit()

    @property
    def last_viewed_deal_id(self) -> Optional[str]:
        return self._last_viewed

    def select(self, deal_id: str) -> None:
        """The single setter, called once per "open deal detail" action."""
        self._last_viewed = deal_id
        if self._db_path is not None:
            self._write(LAST_VIEWED_KEY, deal_id)
        logger.debug("Last viewed deal set to %s", deal_id)
        for listener in list(self._listeners):
            listener(deal_id)

    def subscribe(self, listener: ViewStateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
