"""
HTTP client for the Weave router API.

Wraps one ``httpx.Client`` bound to ``http://{address}:{http_port}`` and
exposes one method per router endpoint. All bodies are plaintext; form
data is sent url-encoded. Every call is synchronous and blocks for at
most the configured timeout.
"""

from __future__ import annotations

import httpx

from weaveapi.exceptions import RemoteStatusError, TransportError
from weaveapi.utils.logger import get_logger

log = get_logger(__name__)

FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


class RouterClient:
    """
    Synchronous client for the router's HTTP surface.

    Attributes:
        base_url: Router API base URL.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Args:
            base_url: e.g. "http://127.0.0.1:6784".
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers=FORM_HEADERS,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> RouterClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # =========================================================================
    # Transport
    # =========================================================================

    def call(
        self,
        method: str,
        path: str,
        *,
        data: dict | None = None,
        params: dict | None = None,
    ) -> str:
        """
        Send one request and return the response body.

        Raises:
            TransportError: Connection or I/O failure.
            RemoteStatusError: Non-2xx response.
        """
        method = method.upper()
        url = f"{self.base_url}{path}"
        log.debug(f"{method} {url} params={params} data={data}")
        try:
            response = self._client.request(method, path, data=data, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._handle_http_error(e, method, url)
        except httpx.RequestError as e:
            log.error(f"Request error on {method} {url}: {e}")
            raise TransportError(str(e), method, url) from e
        return response.text

    @staticmethod
    def _handle_http_error(e: httpx.HTTPStatusError, method: str, url: str) -> None:
        """Log and re-raise a status error as RemoteStatusError."""
        status = e.response.status_code
        detail = e.response.text.strip()
        log.error(f"HTTP {status} on {method} {url}: {detail}")
        raise RemoteStatusError(status, method, url, detail) from e

    # =========================================================================
    # IPAM
    # =========================================================================

    @staticmethod
    def _ip_path(identity: str, subnet: str | None = None) -> str:
        if subnet:
            return f"/ip/{identity}/{subnet}"
        return f"/ip/{identity}"

    @staticmethod
    def _check_alive(check_alive: bool) -> dict | None:
        return {"check-alive": "true"} if check_alive else None

    def ip_lookup(self, identity: str, subnet: str | None = None) -> str:
        """Return the address ``identity`` owns (in ``subnet`` if given)."""
        return self.call("GET", self._ip_path(identity, subnet)).strip()

    def ip_allocate(
        self, identity: str, subnet: str | None = None, check_alive: bool = False
    ) -> str:
        """Allocate an address for ``identity`` and return it in CIDR form."""
        return self.call(
            "POST",
            self._ip_path(identity, subnet),
            params=self._check_alive(check_alive),
        ).strip()

    def ip_claim(self, identity: str, cidr: str, check_alive: bool = False) -> str:
        """Tell the pool that ``identity`` uses the explicit address ``cidr``."""
        return self.call(
            "PUT", self._ip_path(identity, cidr), params=self._check_alive(check_alive)
        )

    def ip_release(self, identity: str, address: str) -> str:
        """Release ``address`` (no prefix length) held by ``identity``."""
        return self.call("DELETE", f"/ip/{identity}/{address}")

    def ipinfo_tracker(self) -> str:
        """Name of the IPAM tracker in use ("awsvpc" in AWS VPC mode)."""
        return self.call("GET", "/ipinfo/tracker").strip()

    # =========================================================================
    # DNS
    # =========================================================================

    def name_register(
        self, identity: str, address: str, fqdn: str, check_alive: bool = False
    ) -> str:
        data = {"fqdn": fqdn}
        if check_alive:
            data["check-alive"] = "true"
        return self.call("PUT", f"/name/{identity}/{address}", data=data)

    def name_unregister(
        self, identity: str, address: str, fqdn: str | None = None
    ) -> str:
        params = {"fqdn": fqdn} if fqdn else None
        return self.call("DELETE", f"/name/{identity}/{address}", params=params)

    # =========================================================================
    # Expose
    # =========================================================================

    def expose(self, cidr: str, skip_nat: bool = False) -> str:
        params = {"skipNAT": "true"} if skip_nat else None
        return self.call("POST", f"/expose/{cidr}", params=params)

    # =========================================================================
    # Status
    # =========================================================================

    def status(self, path: str = "/status") -> str:
        return self.call("GET", path)

    # =========================================================================
    # Peers
    # =========================================================================

    def connect(self, peers: list[str], replace: bool = False) -> str:
        data = {"peer": list(peers), "replace": "true" if replace else "false"}
        return self.call("POST", "/connect", data=data)

    def forget(self, peers: list[str]) -> str:
        return self.call("POST", "/forget", data={"peer": list(peers)})

    def remove_peer(self, peer: str) -> str:
        return self.call("DELETE", f"/peer/{peer}")

    def prime(self) -> str:
        return self.call("GET", "/ring")
