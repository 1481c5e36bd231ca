"""
DiffWatch Webhook Client.

Posts change payloads to the receiver over HTTP.
Requires Python 3.11+.
"""

import httpx

from models.payload import ChangePayload
from utils.logger import LoggerMixin


class WebhookClient(LoggerMixin):
    """
    Delivers payloads with a bounded timeout.

    Delivery is best effort: failures are logged by category and
    reported through the return value, never retried.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            url: Receiver endpoint
            timeout: Seconds allowed for the whole request
            transport: Optional httpx transport, mainly for tests
        """
        self._url = url
        self._timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return self._url

    def send(self, payload: ChangePayload) -> bool:
        """
        POST a payload as JSON.

        Args:
            payload: Payload to deliver

        Returns:
            True if the receiver answered with a 2xx status
        """
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(
                    self._url,
                    content=payload.model_dump_json(),
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
        except httpx.ConnectError as e:
            self.log.error(
                "webhook_connection_refused",
                url=self._url,
                error=str(e),
                hint="Is the webhook receiver running?",
            )
            return False
        except httpx.TimeoutException as e:
            self.log.error(
                "webhook_timed_out",
                url=self._url,
                timeout=self._timeout,
                error=str(e),
            )
            return False
        except httpx.HTTPStatusError as e:
            self.log.error(
                "webhook_server_error",
                url=self._url,
                status=e.response.status_code,
            )
            return False
        except httpx.HTTPError as e:
            self.log.error("webhook_failed", url=self._url, error=str(e))
            return False

        self.log.info("webhook_sent", url=self._url, status=response.status_code)
        return True
