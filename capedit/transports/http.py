"""HTTP executor posting command requests to a device bridge endpoint."""

from __future__ import annotations

import json
import logging

import httpx

from capedit.core.errors import (
    TransportConnectError,
    TransportSendError,
    TransportTimeoutError,
)
from capedit.core.model import CommandRequest, CommandResult

LOGGER = logging.getLogger(__name__)


class HTTPExecutor:
    def __init__(
        self,
        execute_url: str,
        *,
        timeout_s: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.execute_url = execute_url
        self.timeout_s = timeout_s
        self._client = client

    def execute(self, request: CommandRequest) -> CommandResult:
        """POST the request and interpret the ``{success, results, message}`` reply.

        HTTP error statuses raise :class:`TransportSendError` carrying the
        status code and reason phrase.
        """
        LOGGER.debug("POST %s %s.%s v%s", self.execute_url, request.service_name, request.command, request.version)
        try:
            if self._client is not None:
                response = self._client.post(self.execute_url, json=request.to_payload())
            else:
                with httpx.Client(timeout=self.timeout_s) as client:
                    response = client.post(self.execute_url, json=request.to_payload())
        except httpx.TimeoutException as exc:
            raise TransportTimeoutError(f"Timed out calling {self.execute_url}") from exc
        except httpx.RequestError as exc:
            raise TransportConnectError(f"Request to {self.execute_url} failed: {exc}") from exc

        if response.is_error:
            raise TransportSendError(response.status_code, response.reason_phrase)

        try:
            body = response.json()
        except json.JSONDecodeError as exc:
            raise TransportSendError(response.status_code, "Invalid JSON response") from exc
        if not isinstance(body, dict):
            raise TransportSendError(response.status_code, "Unexpected response shape")

        results = body.get("results")
        if results is not None and not isinstance(results, str):
            results = json.dumps(results)
        return CommandResult(
            success=body.get("success") is True,
            results=results,
            message=body.get("message"),
            request=request,
        )
