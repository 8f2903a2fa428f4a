from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from shopdesk.application.exceptions import GatewayError


class AppsScriptClient:
    """
    Single-endpoint client for a Google Apps Script web app.

    Requests are POSTed as a JSON string with a text/plain content type,
    which Apps Script accepts without a CORS preflight. The web app answers
    through a redirect, so redirects are followed.
    """

    def __init__(self, url: str, timeout: float = 15.0, client: httpx.Client | None = None) -> None:
        if not url:
            raise ValueError("Apps Script URL is required")
        self._url = url
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._logger = logging.getLogger(__name__)

    def post(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            response = self._client.post(
                self._url,
                content=json.dumps(payload, ensure_ascii=False).encode("utf-8"),
                headers={"Content-Type": "text/plain;charset=utf-8"},
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("API request error", extra={"kind": payload.get("action"), "error": str(e)})
            raise GatewayError(f"Apps Script request failed: {e}") from e

        if not isinstance(data, dict):
            raise GatewayError("Apps Script returned a non-object response")
        return data

    def get(self) -> dict[str, Any]:
        try:
            response = self._client.get(self._url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error("API request error", extra={"kind": "get", "error": str(e)})
            raise GatewayError(f"Apps Script request failed: {e}") from e

        if not isinstance(data, dict):
            raise GatewayError("Apps Script returned a non-object response")
        return data
