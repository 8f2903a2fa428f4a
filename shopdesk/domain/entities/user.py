from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    phone: str
    name: str
    sheet_url: str | None = None
    sheet_id: str | None = None

    @property
    def has_backend(self) -> bool:
        return bool(self.sheet_url and self.sheet_id)
