from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional

import requests

from app.config import get_settings
from app.models import DataConnector, DataConnectorEndpoint
from app.services.data_mapping import render_template

logger = logging.getLogger(__name__)

RequestFunc = Callable[[str, str, dict[str, str], Optional[dict[str, Any]], Any, int], Any]


class DataConnectorError(RuntimeError):
    """Raised when a data connector call fails or returns an error status."""


@dataclass(frozen=True)
class DataConnectorResponse:
    status: int
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)


class DataConnectorClient:
    """Calls a data connector endpoint with the connector's auth and headers applied."""

    def __init__(
        self,
        connector: DataConnector,
        *,
        timeout_seconds: int | None = None,
        request_func: RequestFunc | None = None,
    ) -> None:
        base_url = (connector.base_url or "").strip()
        if not base_url:
            raise ValueError("Data connector base URL is required.")
        if timeout_seconds is None:
            timeout_seconds = get_settings().data_connector_timeout_seconds

        self._connector = connector
        self._base_url = base_url.rstrip("/")
        self._timeout = max(1, timeout_seconds)
        self._request_func = request_func

    def execute(
        self, endpoint: DataConnectorEndpoint, data: Mapping[str, Any] | None = None
    ) -> DataConnectorResponse:
        context = dict(data or {})
        path = render_template(endpoint.path or "", context)
        url = self._build_url(str(path))
        params = render_template(endpoint.query, context) if endpoint.query else None
        body = render_template(endpoint.body, context) if endpoint.body is not None else None
        method = (endpoint.method or "GET").upper()
        headers = self._build_headers()

        logger.info("Calling data connector %s endpoint %s (%s %s)", self._connector.name, endpoint.name, method, url)
        try:
            response = self._dispatch_request(method, url, headers, params, body)
        except requests.RequestException as exc:
            logger.warning("Data connector %s endpoint %s failed: %s", self._connector.name, endpoint.name, exc)
            raise DataConnectorError(
                f"Data connector '{self._connector.name}' endpoint '{endpoint.name}' failed: {exc}"
            ) from exc

        if response.status_code >= 400:
            detail = self._extract_detail(response)
            logger.warning(
                "Data connector %s endpoint %s responded with %s",
                self._connector.name,
                endpoint.name,
                response.status_code,
            )
            raise DataConnectorError(
                f"Data connector '{self._connector.name}' endpoint '{endpoint.name}' "
                f"responded with {response.status_code}: {detail}"
            )

        return DataConnectorResponse(
            status=response.status_code,
            payload=self._parse_payload(response),
            headers=dict(getattr(response, "headers", None) or {}),
        )

    def _build_url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        if not path:
            return self._base_url
        return f"{self._base_url}/{path.lstrip('/')}"

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        headers.update(self._connector.headers or {})

        credentials = self._connector.credentials or {}
        auth_type = (self._connector.auth_type or "none").lower()
        if auth_type == "bearer":
            headers["Authorization"] = f"Bearer {credentials.get('token', '')}"
        elif auth_type == "basic":
            raw = f"{credentials.get('username', '')}:{credentials.get('password', '')}"
            headers["Authorization"] = "Basic " + base64.b64encode(raw.encode("utf-8")).decode("ascii")
        return headers

    def _dispatch_request(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        params: Optional[dict[str, Any]],
        body: Any,
    ):
        if self._request_func is not None:
            return self._request_func(method, url, headers, params, body, self._timeout)

        return requests.request(
            method,
            url,
            headers=headers,
            params=params,
            json=body,
            timeout=self._timeout,
        )

    @staticmethod
    def _parse_payload(response: Any) -> Any:
        if response.status_code == 204:
            return None
        try:
            return response.json()
        except ValueError:
            text = getattr(response, "text", None)
            return text or None

    @staticmethod
    def _extract_detail(response: Any) -> str:
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if isinstance(payload, Mapping):
            message = payload.get("message") or payload.get("error")
            if message:
                return str(message)
        text = getattr(response, "text", None)
        if text:
            return str(text).strip()
        reason = getattr(response, "reason", None)
        if reason:
            return str(reason)
        return "unknown error"
