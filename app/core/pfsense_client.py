# app/core/pfsense_client.py
from typing import Any, Dict, Optional

import httpx

from app.core.exceptions import UpstreamUnavailable
from app.utils.logger import get_logger

logger = get_logger(__name__)


class PfSenseClient:
    """
    Thin HTTP wrapper around the pfSense REST API (v2).

    Handles base URL, Basic auth, TLS verification and timeouts, and turns
    every transport failure or non-2xx answer into UpstreamUnavailable.
    Callers get the `data` member of the pfSense response envelope.
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        verify_ssl: bool = False,
        timeout: float = 15.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            base_url: Appliance URL, e.g. https://192.168.1.1
            username: API user
            password: API user's password
            verify_ssl: Verify the appliance certificate (off for self-signed)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{self.base_url}/api/v2",
            auth=(username, password),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            verify=verify_ssl,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PfSenseClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            response = self._client.request(method, path, params=params, json=json)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:500]
            logger.error(
                f"[pfSense] {method} {path} failed: status={e.response.status_code} body={body}"
            )
            raise UpstreamUnavailable(
                f"pfSense rejected {method} {path} ({e.response.status_code})",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[pfSense] {method} {self.base_url}/api/v2{path} failed: {e!r}")
            raise UpstreamUnavailable(f"pfSense unreachable: {e.__class__.__name__}") from e

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamUnavailable(f"pfSense returned invalid JSON for {method} {path}") from e

        if isinstance(payload, dict) and "data" in payload:
            return payload["data"]
        return payload

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("POST", path, json=json)

    def patch(self, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("DELETE", path, params=params)
