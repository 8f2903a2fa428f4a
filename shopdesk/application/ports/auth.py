from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from shopdesk.domain.entities.user import User


@dataclass(frozen=True)
class AuthResult:
    success: bool
    message: str = ""
    user: User | None = None


class AuthPort(ABC):
    """
    Account operations against the shop backend.

    Passwords travel and are compared in plaintext on the backend side.
    Adapters must not hash them, or existing accounts stop matching.
    """

    @abstractmethod
    def user_exists(self, phone: str) -> bool:
        """Raises GatewayError if the backend cannot answer."""
        raise NotImplementedError

    @abstractmethod
    def register(self, phone: str, password: str, name: str) -> AuthResult:
        raise NotImplementedError

    @abstractmethod
    def login(self, phone: str, password: str) -> AuthResult:
        raise NotImplementedError

    @abstractmethod
    def change_password(self, phone: str, old_password: str, new_password: str) -> AuthResult:
        raise NotImplementedError
