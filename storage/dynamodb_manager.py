"""DynamoDB-backed store for state kept between scrape runs."""
import logging
from typing import Any, List, Optional

import boto3
from botocore.exceptions import ClientError

from processor.models import EventRecord, RawEvent
from storage.state_store import StateStore, decode_snapshot, encode_snapshot

logger = logging.getLogger(__name__)


class DynamoDBStateStore(StateStore):
    """
    State store keeping one item per state key.

    Items are keyed by ``state_key`` and hold their data in ``value``:
    'last_page' (number), 'snapshot' (JSON string) and 'last_refresh'
    (epoch seconds).
    """

    LAST_PAGE_KEY = 'last_page'
    SNAPSHOT_KEY = 'snapshot'
    LAST_REFRESH_KEY = 'last_refresh'

    def __init__(self, table_name: str):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
        """
        self.table_name = table_name
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized DynamoDBStateStore for table: {table_name}")

    def get_last_page(self) -> Optional[int]:
        value = self._get_value(self.LAST_PAGE_KEY)
        return int(value) if value is not None else None

    def save_last_page(self, page_count: int) -> None:
        self._put_value(self.LAST_PAGE_KEY, page_count)

    def load_snapshot(self) -> Optional[List[RawEvent]]:
        value = self._get_value(self.SNAPSHOT_KEY)
        if value is None:
            return None
        return decode_snapshot(value)

    def save_snapshot(self, events: List[EventRecord]) -> None:
        self._put_value(self.SNAPSHOT_KEY, encode_snapshot(events))
        logger.info(f"Saved snapshot of {len(events)} events")

    def get_last_refresh(self) -> Optional[int]:
        value = self._get_value(self.LAST_REFRESH_KEY)
        return int(value) if value is not None else None

    def save_last_refresh(self, timestamp: int) -> None:
        self._put_value(self.LAST_REFRESH_KEY, timestamp)

    def _get_value(self, state_key: str) -> Any:
        """
        Read the value stored under a state key.

        Args:
            state_key: Item key

        Returns:
            Stored value, or None if the item does not exist
        """
        try:
            response = self.table.get_item(Key={'state_key': state_key})
        except ClientError as e:
            logger.error(f"Error reading '{state_key}' from DynamoDB: {e}")
            raise

        item = response.get('Item')
        return item.get('value') if item else None

    def _put_value(self, state_key: str, value: Any) -> None:
        try:
            self.table.put_item(Item={'state_key': state_key, 'value': value})
        except ClientError as e:
            logger.error(f"Error writing '{state_key}' to DynamoDB: {e}")
            raise
