"""HTTP client for the admin introspection and records endpoints."""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Callable, Dict, List, Optional

from models.schema import ModelDescriptor, RecordPage, parse_models
from utils.exceptions import NotAuthenticated, RequestFailed

log = logging.getLogger(__name__)

INTROSPECT_PATH = "/api/admin/introspect"
RECORDS_PATH = "/api/admin/records"
TOKEN_HEADER = "x-admin-token"

TokenProvider = Callable[[], Optional[str]]


class AdminApiClient:
    """Thin wrapper over the admin API using :mod:`urllib.request`.

    Parameters
    ----------
    base_url:
        Scheme and host of the admin server, e.g. ``"http://localhost:3000"``.
    token_provider:
        Callable returning the current admin token, or ``None`` when signed
        out. It is consulted on every request so a new token takes effect
        immediately.
    timeout:
        Socket timeout in seconds for each request.

    Every failure surfaces as :class:`~utils.exceptions.RequestFailed`. The
    message is the ``error`` field of the response body when the server sent
    one, otherwise ``"Request failed (<status>)"``.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self.timeout = timeout

    # -- Endpoints ----------------------------------------------------------

    def introspect(self) -> List[ModelDescriptor]:
        return parse_models(self._request("GET", INTROSPECT_PATH))

    def list_records(self, model: str, skip: int, take: int) -> RecordPage:
        payload = self._request(
            "GET",
            RECORDS_PATH,
            query={"model": model, "skip": skip, "take": take},
        )
        return RecordPage.from_dict(payload, skip=skip, take=take)

    def create_record(self, model: str, data: Dict[str, Any]) -> Any:
        return self._request("POST", RECORDS_PATH, body={"model": model, "data": data})

    def update_record(self, model: str, record_id: Any, data: Dict[str, Any]) -> Any:
        return self._request(
            "PUT",
            RECORDS_PATH,
            body={"model": model, "id": record_id, "data": data},
        )

    def delete_record(self, model: str, record_id: Any) -> Any:
        return self._request(
            "DELETE", RECORDS_PATH, body={"model": model, "id": record_id}
        )

    # -- Transport ----------------------------------------------------------

    def _url(self, path: str, query: Optional[Dict[str, Any]] = None) -> str:
        url = self.base_url + path
        if query:
            url += "?" + urllib.parse.urlencode(query)
        return url

    def _request(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Dict[str, Any]] = None,
        body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        token = self._token_provider()
        if not token:
            raise NotAuthenticated()

        url = self._url(path, query)
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
        headers = {
            TOKEN_HEADER: token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        request = urllib.request.Request(url, data=data, headers=headers, method=method)
        log.debug("%s %s", method, url)

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            payload = _decode(exc.read())
            error = RequestFailed.from_status(exc.code, payload)
            log.warning("%s %s failed with HTTP %s: %s", method, url, exc.code, error)
            raise error from exc
        except urllib.error.URLError as exc:
            log.warning("%s %s unreachable: %s", method, url, exc.reason)
            raise RequestFailed(f"Request failed: {exc.reason}") from exc
        except (TimeoutError, OSError) as exc:
            log.warning("%s %s failed: %s", method, url, exc)
            raise RequestFailed(f"Request failed: {exc}") from exc

        return _decode(raw)


def _decode(raw: bytes) -> Any:
    """Parse a JSON body; empty or non-JSON bodies yield ``None``."""

    if not raw:
        return None
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return None


__all__ = [
    "AdminApiClient",
    "INTROSPECT_PATH",
    "RECORDS_PATH",
    "TOKEN_HEADER",
]
