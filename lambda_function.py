"""AWS Lambda handler for the calendar chat service."""
import json
import logging
import os
import time
from typing import Dict, Any

from chat.router import ChatRouter
from clients.calendar_webhook import CalendarWebhookClient
from clients.chat_model import ChatModelClient, ChatModelError

# Attributes present on every LogRecord; anything else came from `extra`.
_RESERVED_ATTRS = set(
    logging.LogRecord('', 0, '', 0, '', (), None).__dict__
) | {'message', 'asctime'}


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body)
    }


def _parse_request(event: Dict[str, Any]) -> Dict[str, Any]:
    """
    Read the chat request from an API Gateway event or a bare dict.

    Raises:
        ValueError: If the body is not a JSON object or has no message
    """
    payload = event.get('body', event) if isinstance(event, dict) else None
    if isinstance(payload, str):
        payload = json.loads(payload)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")

    message = payload.get('message')
    if not isinstance(message, str) or not message.strip():
        raise ValueError("Request must include a non-empty 'message'")

    history = payload.get('history') or []
    if not isinstance(history, list) or not all(
        isinstance(item, dict) and 'role' in item and 'content' in item
        for item in history
    ):
        raise ValueError("'history' must be a list of role/content objects")

    interactive = payload.get('interactive', True)
    if not isinstance(interactive, bool):
        raise ValueError("'interactive' must be a boolean")

    return {
        'message': message,
        'history': history,
        'interactive': interactive
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for the calendar chat service.

    Args:
        event: API Gateway proxy event whose body holds message, history
            and interactive
        context: Lambda context object

    Returns:
        Response dict with statusCode, headers and JSON body
    """
    # Read configuration from environment variables
    webhook_url = os.environ.get('WEBHOOK_URL')
    session_id = os.environ.get('WEBHOOK_SESSION_ID') or None
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    max_retries = int(os.environ.get('WEBHOOK_MAX_RETRIES', '3'))
    chat_model = os.environ.get('CHAT_MODEL', 'gpt-4o')
    chat_temperature = float(os.environ.get('CHAT_TEMPERATURE', '0.7'))
    route_all = _env_flag('ROUTE_ALL_TO_CALENDAR', 'true')

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Chat request received",
        extra={
            'webhook_configured': bool(webhook_url),
            'route_all_to_calendar': route_all,
            'timeout_seconds': timeout_seconds
        }
    )

    try:
        request = _parse_request(event)
    except ValueError as e:
        logger.warning(f"Rejected chat request: {e}")
        return _response(400, {'error': str(e)})

    try:
        router = ChatRouter(
            webhook_client=CalendarWebhookClient(
                webhook_url,
                timeout=timeout_seconds,
                max_retries=max_retries,
                session_id=session_id
            ),
            chat_client=ChatModelClient(
                model=chat_model,
                temperature=chat_temperature,
                timeout=timeout_seconds
            ),
            route_all_to_calendar=route_all
        )

        reply = router.handle(
            request['message'],
            history=request['history'],
            interactive=request['interactive']
        )

        duration = time.time() - start_time
        logger.info(
            "Chat request completed",
            extra={
                'source': reply.source,
                'formatted_kind': reply.formatted.kind if reply.formatted else None,
                'duration_seconds': round(duration, 2)
            }
        )
        return _response(200, reply.to_dict())

    except ChatModelError as e:
        logger.error(
            f"Chat API error: {e}",
            extra={'error_type': type(e).__name__}
        )
        return _response(500, {'error': 'Failed to process your request'})

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Chat request failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _response(500, {
            'error': 'Failed to process your request',
            'error_type': type(e).__name__
        })
