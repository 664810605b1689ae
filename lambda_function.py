"""AWS Lambda handler for Dream Park Events Sync."""
import json
import logging
import os
import time
from typing import Dict, Any

from processor.event_feed import EventFeed
from scraper.events_scraper import DEFAULT_BASE_URL, ScrapeConfig
from storage.dynamodb_manager import DynamoDBStateStore


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

        return json.dumps(log_data)


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


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Main Lambda handler function for Dream Park Events Sync.

    Args:
        event: EventBridge or API payload; {"force_refresh": true} forces a scrape
        context: Lambda context object

    Returns:
        Response dict with statusCode, events and summary statistics
    """
    # Read configuration from environment variables
    base_url = os.environ.get('BASE_URL', DEFAULT_BASE_URL)
    table_name = os.environ.get('TABLE_NAME', 'dream-park-events-state')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    concurrency_limit = int(os.environ.get('CONCURRENCY_LIMIT', '5'))
    connect_timeout = float(os.environ.get('CONNECT_TIMEOUT_SECONDS', '15'))
    request_timeout = float(os.environ.get('REQUEST_TIMEOUT_SECONDS', '30'))
    max_age_seconds = int(os.environ.get('MAX_AGE_SECONDS', str(EventFeed.MAX_AGE_SECONDS)))
    current_year_only = os.environ.get('CURRENT_YEAR_ONLY', 'false').lower() == 'true'
    force_refresh = bool((event or {}).get('force_refresh', False))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    start_time = time.time()
    logger.info(
        "Lambda execution started",
        extra={
            'base_url': base_url,
            'table_name': table_name,
            'force_refresh': force_refresh
        }
    )

    try:
        state_store = DynamoDBStateStore(table_name=table_name)
        config = ScrapeConfig(
            base_url=base_url,
            concurrency_limit=concurrency_limit,
            connect_timeout=connect_timeout,
            request_timeout=request_timeout,
            hint_store=state_store,
            snapshot_store=state_store,
            current_year_only=current_year_only
        )
        feed = EventFeed(config, max_age_seconds=max_age_seconds)
        result = feed.load(force_refresh=force_refresh)

        duration = time.time() - start_time
        statistics = {
            'events': len(result.events),
            'from_cache': result.from_cache,
            'duration_seconds': round(duration, 2)
        }
        if result.report:
            statistics.update({
                'page_count': result.report.page_count,
                'failed_pages': result.report.failed_pages,
                'date_parse_failures': len(result.report.date_parse_failures)
            })

        logger.info("Lambda execution completed successfully", extra=statistics)

        return {
            'statusCode': 200,
            'body': json.dumps({
                'message': result.message or 'Events loaded successfully',
                'statistics': statistics,
                'events': [_event_to_dict(e) for e in result.events]
            })
        }

    except Exception as e:
        duration = time.time() - start_time

        logger.error(
            f"Lambda execution failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )

        return {
            'statusCode': 500,
            'body': json.dumps({
                'message': 'Failed to load events',
                'error': str(e),
                'error_type': type(e).__name__,
                'duration_seconds': round(duration, 2)
            })
        }


def _event_to_dict(event) -> Dict[str, Any]:
    return {
        'id': event.unique_id,
        'title': event.title,
        'raw_date_text': event.raw_date_text,
        'start_date': event.start_date.isoformat(),
        'end_date': event.end_date.isoformat() if event.end_date else None,
        'formatted_date': event.formatted_date,
        'link': event.link
    }
