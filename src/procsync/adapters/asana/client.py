"""
Asana API Client - Thin request layer over the Asana REST API.

Every call returns ``Ok(data)`` or ``Err(TrackerError)``; nothing is retried
here. Callers decide what a failure means.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from procsync.core.exceptions import (
    AccessDeniedError,
    AuthenticationError,
    RateLimitError,
    ResourceNotFoundError,
    TrackerError,
    TransientError,
)
from procsync.core.ports.config_provider import DEFAULT_ASANA_URL
from procsync.core.result import Err, Ok, Result


# Asana reports deleted or foreign gids with this message, sometimes as a 400
UNKNOWN_OBJECT_MARKERS = ("unknown object", "not a recognized id", "not found")

PAGE_SIZE = 100


class AsanaClient:
    """
    Authenticated access to the Asana object API.

    The access token is bound per instance and never read from ambient state,
    so tests can construct clients with fake sessions.
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: int = 30,
    ) -> None:
        """
        Initialize the client.

        Args:
            access_token: Personal access token or OAuth bearer token.
            base_url: Optional override for the Asana API URL.
            session: Optional custom requests session for testing.
            timeout: Request timeout in seconds.
        """
        self._access_token = access_token
        self.base_url = (base_url or DEFAULT_ASANA_URL).rstrip("/")
        self._session = session or requests.Session()
        self.timeout = timeout
        self.logger = logging.getLogger("AsanaClient")

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._access_token}",
            "Accept": "application/json",
        }

    def _build_url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Result[dict[str, Any], TrackerError]:
        url = self._build_url(path)
        self.logger.debug(f"{method} {path}")
        try:
            response = self._session.request(
                method,
                url,
                headers=self._headers,
                params=params,
                json=json,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            return Err(TransientError(f"Asana request failed: {method} {path}", cause=exc))

        if response.status_code >= 400:
            return Err(self._error_from_response(response, path))

        if response.status_code == 204 or not response.content:
            return Ok({})

        try:
            payload = response.json()
        except ValueError as exc:
            return Err(TrackerError("Invalid response from Asana API", cause=exc))

        return Ok(payload if isinstance(payload, dict) else {"data": payload})

    def _error_from_response(self, response: requests.Response, path: str) -> TrackerError:
        status = response.status_code
        message = "Asana API request failed"
        try:
            payload = response.json()
        except ValueError:
            message = response.text or message
        else:
            errors = payload.get("errors") if isinstance(payload, dict) else None
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                detail = errors[0].get("message")
                if isinstance(detail, str) and detail:
                    message = detail

        resource_id = path.rstrip("/").split("/")[-1] or None

        if status == 401:
            return AuthenticationError(message, resource_id=resource_id)
        if status in (402, 403):
            return AccessDeniedError(message, resource_id=resource_id)
        if status == 404:
            return ResourceNotFoundError(message, resource_id=resource_id)
        if status == 429:
            retry_after = response.headers.get("Retry-After")
            return RateLimitError(
                message,
                retry_after=float(retry_after) if retry_after else None,
                resource_id=resource_id,
            )
        if status >= 500:
            return TransientError(message, resource_id=resource_id)
        if any(marker in message.lower() for marker in UNKNOWN_OBJECT_MARKERS):
            return ResourceNotFoundError(message, resource_id=resource_id)
        return TrackerError(message, resource_id=resource_id)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def call(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        params: dict[str, Any] | None = None,
    ) -> Result[Any, TrackerError]:
        """
        Make one API call.

        Args:
            method: HTTP method.
            path: Endpoint path, e.g. ``/projects/123``.
            body: Request object; wrapped in Asana's ``{"data": ...}`` envelope.
            params: Query parameters.

        Returns:
            ``Ok`` with the unwrapped ``data`` member, or ``Err`` with a typed error.
        """
        json = {"data": body} if body is not None else None
        return self._send(method, path, params=params, json=json).map(
            lambda payload: payload.get("data", payload)
        )

    def call_paginated(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
    ) -> Result[list[Any], TrackerError]:
        """
        GET every page of a collection, following ``next_page.offset`` cursors.
        """
        items: list[Any] = []
        request_params = dict(params) if params else {}
        request_params.setdefault("limit", PAGE_SIZE)

        while True:
            result = self._send("GET", path, params=dict(request_params))
            if result.is_err():
                return Err(result.err())

            payload = result.unwrap()
            items.extend(payload.get("data") or [])

            next_page = payload.get("next_page") or {}
            offset = next_page.get("offset")
            if not offset:
                return Ok(items)
            request_params["offset"] = offset

    def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        *,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Like :meth:`call`, but raises the TrackerError instead of returning it."""
        result = self.call(method, path, body, params=params)
        if result.is_err():
            raise result.err()
        return result.unwrap()
