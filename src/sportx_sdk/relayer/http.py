"""
HTTP exchange with the SportX relayer
"""

import json
from typing import Any, Dict, Optional

import httpx
import structlog

from ..constants import RELAYER_TIMEOUT
from ..errors import APIError, APITimeoutError

logger = structlog.get_logger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


class RelayerHTTPClient:
    """JSON over HTTP against one relayer base URL.

    Every call is bounded by ``timeout`` and never retried; callers own retry
    policy.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = RELAYER_TIMEOUT,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(timeout=timeout)

    async def close(self) -> None:
        if self._owns_client:
            await self._http_client.aclose()

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        logger.debug("relayer_request", method=method, url=url)
        try:
            return await self._http_client.request(
                method, url, timeout=self.timeout, **kwargs
            )
        except httpx.TimeoutException as e:
            raise APITimeoutError(f"{method} {url} timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise APIError(None, f"{method} {url} failed: {e}") from e

    async def get(self, path: str, error_message: str) -> Dict[str, Any]:
        response = await self._send("GET", path)
        return self.try_parse_response(response, error_message)

    async def post(self, path: str, payload: Any, error_message: str) -> Dict[str, Any]:
        response = await self._send(
            "POST", path, content=json.dumps(payload), headers=JSON_HEADERS
        )
        return self.try_parse_response(response, error_message)

    @staticmethod
    def try_parse_response(response: httpx.Response, error_message: str) -> Any:
        """Parse a relayer response body.

        Raises:
            APIError: If the body is not JSON, or the status is not 200
        """
        text = response.text
        try:
            result = json.loads(text)
        except ValueError:
            raise APIError(
                None, f"Can't parse JSON {text}", status_code=response.status_code
            ) from None
        if response.status_code != 200:
            logger.debug(
                "relayer_error",
                status_code=response.status_code,
                reason_phrase=response.reason_phrase,
            )
            raise APIError(
                result,
                f"{error_message}. Response code: {response.status_code}",
                status_code=response.status_code,
            )
        logger.debug("relayer_response", status=_status_of(result))
        return result


def _status_of(result: Any) -> Optional[str]:
    if isinstance(result, dict):
        return result.get("status")
    return None


def unwrap(result: Any, *keys: str) -> Any:
    """Pick ``result["data"][keys...]`` out of a relayer envelope.

    Raises:
        APIError: If the body is not an object or a key is missing
    """
    value = result
    for key in ("data",) + keys:
        if not isinstance(value, dict) or key not in value:
            raise APIError(result, f"Relayer response is missing '{key}'")
        value = value[key]
    return value
