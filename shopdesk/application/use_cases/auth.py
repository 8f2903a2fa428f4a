from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from shopdesk.application.exceptions import GatewayError, ValidationError
from shopdesk.application.ports.auth import AuthPort, AuthResult
from shopdesk.application.ports.session_store import SessionStorePort
from shopdesk.application.use_cases.salon_session import SalonUseCase
from shopdesk.application.utils.validation import require_account_phone, require_strong_password
from shopdesk.domain.entities.user import User

NETWORK_ERROR_MESSAGE = "Network error, please try again."


@dataclass(frozen=True)
class Availability:
    is_available: bool
    message: str
    error: bool = False


@dataclass
class AuthUseCase:
    auth: AuthPort
    sessions: SessionStorePort
    salon: SalonUseCase
    default_sheet_url: str | None = None

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def check_availability(self, phone: str) -> Availability:
        phone = require_account_phone(phone)
        try:
            exists = self.auth.user_exists(phone)
        except GatewayError as e:
            self._logger.error("Availability check failed", extra={"error": str(e)})
            return Availability(is_available=False, message="Unable to verify account status.", error=True)
        if exists:
            return Availability(is_available=False, message="Account already registered.")
        return Availability(is_available=True, message="Phone number is available.")

    def register(self, phone: str, password: str, confirm_password: str, name: str) -> AuthResult:
        phone = require_account_phone(phone)
        require_strong_password(password)
        if password != confirm_password:
            raise ValidationError("Passwords do not match.")
        if not (name or "").strip():
            raise ValidationError("Name is required.")
        return self._sign_in(lambda: self.auth.register(phone, password, name.strip()))

    def login(self, phone: str, password: str) -> AuthResult:
        phone = require_account_phone(phone)
        if not password:
            raise ValidationError("Password is required.")
        return self._sign_in(lambda: self.auth.login(phone, password))

    def change_password(self, old_password: str, new_password: str, confirm_password: str) -> AuthResult:
        user = self.salon_user()
        if user is None:
            raise ValidationError("Not logged in.")
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match.")
        require_strong_password(new_password)
        try:
            return self.auth.change_password(user.phone, old_password, new_password)
        except GatewayError as e:
            self._logger.error("Password change failed", extra={"error": str(e)})
            return AuthResult(success=False, message=NETWORK_ERROR_MESSAGE)

    def logout(self) -> None:
        self.sessions.clear()
        self.salon.end_session()

    def restore_session(self) -> User | None:
        """Reopen the cached session, if any, and load its data."""
        user = self.sessions.load()
        if user is None:
            return None
        self.salon.start_session(user)
        return user

    def salon_user(self) -> User | None:
        return self.salon.current_user

    def _sign_in(self, call) -> AuthResult:
        try:
            result = call()
        except GatewayError as e:
            self._logger.error("Authentication request failed", extra={"error": str(e)})
            return AuthResult(success=False, message=NETWORK_ERROR_MESSAGE)

        if not result.success or result.user is None:
            return result

        user = result.user
        if not user.sheet_url and self.default_sheet_url:
            user = replace(user, sheet_url=self.default_sheet_url)
        self.sessions.save(user)
        self.salon.start_session(user)
        return replace(result, user=user)
