"""Read and append date stories in the external spreadsheet API (JSON over HTTP)."""
import logging
from typing import List, Optional

import requests

from datespots.config import STORE_TIMEOUT_SEC, STORE_URL
from datespots.core.errors import RecordStoreError
from datespots.models.story import DateStory, story_from_dict

logger = logging.getLogger(__name__)


def load_stories(url: Optional[str] = None, timeout: float = STORE_TIMEOUT_SEC) -> List[DateStory]:
    """GET the collection and return its rows as DateStory, in store order.

    Rows that are not JSON objects are skipped. Raises RecordStoreError on
    network failure, an error status, or a body that is not a JSON array.
    """
    url = url or STORE_URL
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except requests.RequestException as e:
        raise RecordStoreError(f"GET {url} failed: {e}") from e
    except ValueError as e:
        raise RecordStoreError(f"GET {url} returned non-JSON body") from e
    if not isinstance(data, list):
        raise RecordStoreError(f"GET {url} returned {type(data).__name__}, expected a list")

    out = []
    for item in data:
        story = story_from_dict(item)
        if story is None:
            logger.debug("Skipping non-object row: %r", item)
            continue
        out.append(story)
    logger.info("Loaded %d stories from record store", len(out))
    return out


def append_story(story: DateStory, url: Optional[str] = None, timeout: float = STORE_TIMEOUT_SEC) -> None:
    """POST one story as {"data": story}. The response body is not used."""
    url = url or STORE_URL
    try:
        resp = requests.post(url, json={"data": story.to_dict()}, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise RecordStoreError(f"POST {url} failed: {e}") from e
    logger.info("Appended story %s (%s)", story.id, story.location)
