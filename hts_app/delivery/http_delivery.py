"""HTTP POST webhook transport."""

import json
import socket
from typing import Any, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from hts_app.config.defaults import WebhookParams
from hts_app.errors import TransportError
from hts_app.logging import get_logger


class WebhookTransport(Protocol):
    """Performs a single delivery attempt. Raises TransportError on failure."""

    def post_json(self, body: dict[str, Any]) -> Any: ...


class HttpWebhookTransport:
    """urllib-based JSON POST to the configured webhook URL."""

    def __init__(self, config: WebhookParams):
        self.config = config
        self.logger = get_logger("trade.delivery.http")

        # Validate URL
        parsed = urlparse(config.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Invalid webhook URL: {config.url!r}")

    def _headers(self, data: bytes) -> dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'Content-Length': str(len(data)),
            'User-Agent': 'hts-app/1.0'
        }
        if self.config.headers:
            headers.update(self.config.headers)
        return headers

    def post_json(self, body: dict[str, Any]) -> Any:
        """
        POST `body` as JSON and return the decoded acknowledgement.

        Returns:
            Parsed JSON response, or {"message": <text>} for non-JSON bodies

        Raises:
            TransportError: On HTTP error status, timeout or network failure
        """
        data = json.dumps(body).encode('utf-8')
        req = Request(
            self.config.url,
            data=data,
            headers=self._headers(data),
            method="POST"
        )

        try:
            with urlopen(req, timeout=self.config.timeout_seconds) as response:
                response_code = response.getcode()
                response_data = response.read().decode('utf-8')

        except HTTPError as e:
            raise TransportError(
                f"HTTP {e.code}: {e.reason}",
                status_code=e.code,
                response_body=self._read_error_body(e)
            ) from e

        except URLError as e:
            if isinstance(e.reason, (socket.timeout, TimeoutError)):
                raise TransportError(f"Timeout: {e.reason}", timed_out=True) from e
            raise TransportError(f"Network error: {e.reason}", unreachable=True) from e

        except (socket.timeout, TimeoutError) as e:
            raise TransportError(f"Timeout: {e}", timed_out=True) from e

        except ConnectionError as e:
            raise TransportError(f"Network error: {e}", unreachable=True) from e

        if not 200 <= response_code < 300:
            raise TransportError(
                f"HTTP {response_code}: {response_data[:200]}",
                status_code=response_code,
                response_body=response_data[:200]
            )

        self.logger.debug("Webhook acknowledged", response_code=response_code)
        return self._decode(response_data)

    @staticmethod
    def _decode(response_data: str) -> Any:
        if not response_data.strip():
            return {}
        try:
            return json.loads(response_data)
        except json.JSONDecodeError:
            return {"message": response_data}

    @staticmethod
    def _read_error_body(error: HTTPError) -> str:
        try:
            return error.read().decode('utf-8', errors='replace')[:200]
        except Exception:
            return ""
