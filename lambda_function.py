"""AWS Lambda handler serving upcoming VTuber concerts as JSON."""
import json
import logging
import os
import time
from typing import Dict, Any

import requests

from scraper.teamup_calendar import CalendarFeedError, TeamupCalendarScraper
from processor.concert_processor import ConcertProcessor


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

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _error_response(message: str, error: Exception, start_time: float) -> Dict[str, Any]:
    duration = time.time() - start_time
    return {
        'statusCode': 500,
        'body': json.dumps({
            'message': message,
            'error': str(error),
            'error_type': type(error).__name__,
            'duration_seconds': round(duration, 2)
        })
    }


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler returning the concert list.

    Args:
        event: API Gateway or Function URL event payload
        context: Lambda context object

    Returns:
        Response dict with statusCode and a JSON list of concerts
    """
    # Read configuration from environment variables
    feed_url = os.environ.get('FEED_URL', TeamupCalendarScraper.FEED_URL)
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    feed_timezone = os.environ.get('FEED_TIMEZONE', 'Asia/Tokyo')
    upcoming_only = os.environ.get('UPCOMING_ONLY', 'true').lower() == 'true'

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Lambda execution started",
        extra={
            'feed_url': feed_url,
            'timeout_seconds': timeout_seconds,
            'upcoming_only': upcoming_only
        }
    )

    try:
        scraper = TeamupCalendarScraper(feed_url=feed_url, timeout=timeout_seconds)
        processor = ConcertProcessor(
            upcoming_only=upcoming_only,
            feed_timezone=feed_timezone
        )

        try:
            raw_events = scraper.fetch_events()
        except (requests.RequestException, CalendarFeedError) as e:
            logger.error(
                f"Failed to fetch calendar feed: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _error_response('Failed to fetch calendar feed', e, start_time)

        concerts = processor.process_events(raw_events)

        duration = time.time() - start_time
        logger.info(
            f"Returning {len(concerts)} concerts from {len(raw_events)} events",
            extra={'duration_seconds': round(duration, 2)}
        )

        return {
            'statusCode': 200,
            'headers': {'Content-Type': 'application/json'},
            'body': json.dumps(
                [concert.to_dict() for concert in concerts],
                ensure_ascii=False
            )
        }

    except Exception as e:
        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={'error_type': type(e).__name__},
            exc_info=True
        )
        return _error_response('Failed to build concert list', e, start_time)
