"""One-shot background load of stories from the record store."""
import logging
import threading
from typing import Callable, List, Optional

from datespots.core.errors import RecordStoreError
from datespots.models.story import DateStory

logger = logging.getLogger(__name__)


class StoryLoader:
    """Runs a single load on a daemon thread and hands the result to apply().

    stop() cancels delivery: a load that finishes after stop() is dropped
    instead of being applied to state that is being torn down.
    """

    def __init__(
        self,
        load: Callable[[], List[DateStory]],
        apply: Callable[[List[DateStory]], bool],
    ) -> None:
        self._load = load
        self._apply = apply
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.done = threading.Event()

    def _run(self) -> None:
        try:
            self._deliver()
        finally:
            self.done.set()

    def _deliver(self) -> None:
        try:
            stories = self._load()
        except RecordStoreError as e:
            logger.error("Failed to load data: %s", e)
            return
        if self._stop.is_set():
            logger.info("Load finished after shutdown; dropping %d stories", len(stories))
            return
        if self._apply(stories):
            logger.info("Initial load applied (%d stories)", len(stories))

    def start(self) -> None:
        self._stop.clear()
        self.done.clear()
        self._thread = threading.Thread(target=self._run, name="story-loader", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None
