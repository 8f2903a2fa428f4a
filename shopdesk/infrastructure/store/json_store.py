from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from shopdesk.application.ports.session_store import SessionStorePort
from shopdesk.domain.entities.user import User


class JsonSessionStore(SessionStorePort):
    """The single cached login record, kept as one JSON file."""

    def __init__(self, path: str = "./data/session.json") -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._logger = logging.getLogger(__name__)

    def load(self) -> User | None:
        if not self._path.exists():
            return None
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            # Corrupted cache means logged out.
            self._logger.warning("Ignoring unreadable session file", extra={"error": str(e)})
            return None
        return self._deserialize(data)

    def save(self, user: User) -> None:
        """Save the session atomically."""
        temp_path = self._path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(self._serialize(user), f, indent=2, ensure_ascii=False)
            temp_path.replace(self._path)
        except Exception:
            if temp_path.exists():
                temp_path.unlink()
            raise

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()

    def _serialize(self, user: User) -> dict[str, Any]:
        return {
            "phone": user.phone,
            "name": user.name,
            "googleSheetUrl": user.sheet_url,
            "sheetId": user.sheet_id,
            "version": 1,
        }

    def _deserialize(self, data: dict[str, Any]) -> User | None:
        if not isinstance(data, dict) or not data.get("phone"):
            return None
        return User(
            phone=str(data["phone"]),
            name=str(data.get("name") or "").removeprefix("'"),
            sheet_url=data.get("googleSheetUrl"),
            sheet_id=data.get("sheetId"),
        )
