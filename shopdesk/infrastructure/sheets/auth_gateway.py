from __future__ import annotations

import logging
from typing import Any

from shopdesk.application.exceptions import GatewayError
from shopdesk.application.ports.auth import AuthPort, AuthResult
from shopdesk.infrastructure.sheets.apps_script_client import AppsScriptClient
from shopdesk.infrastructure.sheets.codec import decode_user, force_text


class SheetsAuthGateway(AuthPort):
    """
    Account actions on the master Apps Script.

    Passwords are plaintext on the wire and in the sheet. Login and the old
    password on change are sent unmarked; stored values carry the marker.
    """

    def __init__(self, client: AppsScriptClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def user_exists(self, phone: str) -> bool:
        data = self._client.post({"action": "check_user", "phone": force_text(phone.strip())})
        exists = data.get("exists")
        if not data.get("success") or not isinstance(exists, bool):
            raise GatewayError(data.get("message") or "Unable to verify account status")
        return exists

    def register(self, phone: str, password: str, name: str) -> AuthResult:
        data = self._client.post(
            {
                "action": "register",
                "phone": force_text(phone),
                "password": force_text(password),
                "name": force_text(name),
            }
        )
        return self._to_result(data)

    def login(self, phone: str, password: str) -> AuthResult:
        data = self._client.post(
            {
                "action": "login",
                "phone": force_text(phone.strip()),
                "password": password,
            }
        )
        return self._to_result(data)

    def change_password(self, phone: str, old_password: str, new_password: str) -> AuthResult:
        data = self._client.post(
            {
                "action": "change_password",
                "phone": force_text(phone.strip()),
                "oldPassword": old_password,
                "newPassword": force_text(new_password),
            }
        )
        return self._to_result(data)

    def _to_result(self, data: dict[str, Any]) -> AuthResult:
        success = bool(data.get("success"))
        message = str(data.get("message") or data.get("error") or "")
        user = decode_user(data.get("user")) if success else None
        if not success:
            self._logger.info("Auth action rejected", extra={"reason": message})
        return AuthResult(success=success, message=message, user=user)
