"""Client for the calendar automation webhook."""
import logging
import time
from typing import Any, Dict, Optional

import requests

from chat.models import WebhookReply

logger = logging.getLogger(__name__)

DEFAULT_SPOKEN_RESPONSE = "I found your calendar information."
SPOKEN_FIELDS = ('spokenResponse', 'message', 'response')


class CalendarServiceError(Exception):
    """Raised when the webhook is unreachable, misconfigured or returns no data."""


class CalendarWebhookClient:
    """Client that forwards chat input to the calendar webhook."""

    def __init__(
        self,
        webhook_url: Optional[str],
        timeout: int = 30,
        max_retries: int = 3,
        session_id: Optional[str] = None
    ):
        """
        Initialize the webhook client.

        Args:
            webhook_url: Webhook endpoint; requests fail while it is unset
            timeout: HTTP request timeout in seconds (default: 30)
            max_retries: Attempts made when the connection fails (default: 3)
            session_id: When set, the legacy sendMessage payload is used
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.session_id = session_id

    def send(self, chat_input: str) -> WebhookReply:
        """
        Send a user message to the webhook and read its reply.

        Args:
            chat_input: The user's message

        Returns:
            WebhookReply with the spoken text and optional web response

        Raises:
            CalendarServiceError: If the URL is unset, the status is not
                successful, or the body holds no usable data
            requests.RequestException: If all connection attempts fail
        """
        if not self.webhook_url:
            raise CalendarServiceError("WEBHOOK_URL environment variable is not set")

        response = self._post(self.build_payload(chat_input))

        if not response.ok:
            raise CalendarServiceError(
                f"Calendar API returned {response.status_code}: {response.reason}"
            )

        try:
            raw_data = response.json()
        except ValueError as e:
            raise CalendarServiceError(f"Calendar API returned invalid JSON: {e}") from e

        return self.parse_reply(raw_data)

    def build_payload(self, chat_input: str) -> Dict[str, Any]:
        """Build the request body for the configured contract variant."""
        if self.session_id:
            return {
                'sessionId': self.session_id,
                'action': 'sendMessage',
                'chatInput': chat_input
            }
        return {'chatInput': chat_input}

    def parse_reply(self, raw_data: Any) -> WebhookReply:
        """
        Pick the spoken and web response out of a webhook body.

        Args:
            raw_data: Decoded JSON; an object, or an array whose first
                element is used (unwrapping an n8n-style "json" key)

        Returns:
            WebhookReply

        Raises:
            CalendarServiceError: If there is no object to read from
        """
        calendar_data = raw_data
        if isinstance(raw_data, list):
            first = raw_data[0] if raw_data else None
            if isinstance(first, dict) and first.get('json'):
                calendar_data = first['json']
            else:
                calendar_data = first

        if not calendar_data or not isinstance(calendar_data, dict):
            raise CalendarServiceError("Calendar query failed or returned no data")

        spoken = next(
            (calendar_data[name] for name in SPOKEN_FIELDS if calendar_data.get(name)),
            DEFAULT_SPOKEN_RESPONSE
        )
        web_response = calendar_data.get('webResponse')
        if not isinstance(web_response, str) or not web_response:
            web_response = None

        logger.info(
            "Received calendar response",
            extra={
                'has_web_response': web_response is not None,
                'spoken_length': len(str(spoken))
            }
        )
        return WebhookReply(spoken=str(spoken), web_response=web_response)

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        """
        POST the payload, retrying connection failures with backoff.

        Only connection errors are retried; a request that reached the
        webhook is never resent.

        Raises:
            requests.RequestException: If all retry attempts fail
        """
        base_delay = 1  # seconds

        for attempt in range(self.max_retries):
            try:
                logger.info(
                    f"Sending calendar query (attempt {attempt + 1}/{self.max_retries})"
                )
                return requests.post(
                    self.webhook_url,
                    json=payload,
                    timeout=self.timeout
                )

            except requests.ConnectionError as e:
                if attempt < self.max_retries - 1:
                    delay = base_delay * (2 ** attempt)
                    logger.warning(
                        f"Webhook connection failed (attempt {attempt + 1}/{self.max_retries}): {e}. "
                        f"Retrying in {delay} seconds..."
                    )
                    time.sleep(delay)
                else:
                    logger.error(
                        f"All {self.max_retries} attempts failed. Last error: {e}"
                    )
                    raise
