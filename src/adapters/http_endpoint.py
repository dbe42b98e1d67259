"""
HTTP publish endpoint adapter.

Posts JSON payloads with requests. Anything short of a 2xx response becomes
a TransportError carrying the status code and response body.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import requests

from src.components.publish import TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0


class RequestsPublishEndpoint:
    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        self._timeout = timeout_seconds
        self._headers = {"Content-Type": "application/json", **(headers or {})}

    def post(self, url: str, payload: Mapping[str, Any]) -> dict[str, Any]:
        try:
            response = requests.post(
                url, json=dict(payload), headers=self._headers, timeout=self._timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"Webhook request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Webhook error: {response.status_code} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        logger.debug("Endpoint %s answered %d", url, response.status_code)
        try:
            body = response.json()
        except ValueError:
            return {"raw": response.text}

        if not isinstance(body, dict):
            return {"raw": body}
        return body
