import logging
from typing import Any, Dict, Optional

import requests
import urllib3

logger = logging.getLogger(__name__)

# disable insecure HTTPS warnings (self-signed certs on private endpoints)
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

SERVICE_VPC = "vpc"


class CloudApiError(RuntimeError):
    """A provider API call failed (transport, HTTP status or decoding)."""


class ApiResponse:
    """Decoded JSON body of a provider API call."""

    def __init__(self, data: Any):
        self.data = data

    def unmarshal(self, key: str) -> Any:
        """Return the top-level field ``key`` (e.g. ``port`` or ``ports``)."""
        if not isinstance(self.data, dict) or key not in self.data:
            raise CloudApiError(f"response has no {key!r} field")
        return self.data[key]


class ApiClient:
    """Thin wrapper around a provider's REST services (GET + PUT only)."""

    def __init__(
        self,
        endpoints: Dict[str, str],
        token: Optional[str] = None,
        timeout: int = 30,
        verify_ssl: bool = True,
    ):
        self.endpoints = {service: url.rstrip("/") for service, url in endpoints.items()}
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
        )
        # Token is issued out of band; this client never acquires one.
        if token:
            self.session.headers.update({"X-Auth-Token": token})
        self.logger = logging.getLogger(__name__)

    def _url(self, service: str, resource: str) -> str:
        base = self.endpoints.get(service)
        if not base:
            raise CloudApiError(f"no endpoint configured for service {service!r}")
        return f"{base}/{resource.lstrip('/')}"

    def _request(self, method: str, url: str, **kwargs: Any) -> ApiResponse:
        try:
            resp = self.session.request(
                method,
                url,
                verify=self.verify_ssl,
                timeout=self.timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise CloudApiError(f"{method} {url}: {exc}") from exc

        if not resp.content:
            return ApiResponse({})
        try:
            return ApiResponse(resp.json())
        except ValueError as exc:
            raise CloudApiError(f"{method} {url}: invalid JSON response") from exc

    def list(self, service: str, resource: str, query: Optional[Dict[str, str]] = None) -> ApiResponse:
        """GET a resource or collection, with ``query`` sent as URL parameters."""
        url = self._url(service, resource)
        self.logger.debug("GET %s params=%s", url, query)
        return self._request("GET", url, params=query or {})

    def put(self, service: str, resource: str, body: Dict[str, Any]) -> ApiResponse:
        """PUT a JSON body to a resource."""
        url = self._url(service, resource)
        self.logger.debug("PUT %s body=%s", url, body)
        return self._request("PUT", url, json=body)
