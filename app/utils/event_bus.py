"""
In-process event fan-out for the farm monitor.

The monitoring loop publishes refresh, alert and fetch-failure events; the
vegetation and history services publish their own changes. Listeners run on
a small pool of daemon threads so a slow listener never stalls a poll tick.

Topics are the str enums of ``app.enums.events``; a raw string with the same
value reaches the same listeners. Listeners always receive plain data:
pydantic payloads are dumped to dicts before they are queued.
"""
import logging
import threading
import time
from collections import Counter, defaultdict
from dataclasses import asdict, is_dataclass
from enum import Enum
from queue import Full, Queue
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from pydantic import BaseModel

from app.config import load_config
from app.enums.events import EventType

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]

# Summarize drops at most once a minute, and only after a burst
_DROP_SUMMARY_EVERY = 10
_DROP_SUMMARY_MIN_GAP_S = 60


class _Delivery(NamedTuple):
    topic: str
    listener: Listener
    payload: Any


def _topic_name(topic: EventType | str) -> str:
    return topic.value if isinstance(topic, Enum) else str(topic)


def _to_plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump()
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    return data


class EventBus:
    """
    Process-wide publish/subscribe hub.

    Singleton: every ``EventBus()`` call returns the same instance, so the
    container, services and tests share one listener table.
    """

    _instance: Optional["EventBus"] = None
    _instance_lock = threading.Lock()

    def __new__(cls) -> "EventBus":
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    instance = super().__new__(cls)
                    instance._setup()
                    cls._instance = instance
        return cls._instance

    def _setup(self) -> None:
        config = load_config()
        self.lock = threading.Lock()
        self.subscribers: Dict[str, List[Listener]] = defaultdict(list)
        self._queue_size = max(1, config.eventbus_queue_size)
        self._queue: "Queue[_Delivery]" = Queue(maxsize=self._queue_size)
        self._drops: Counter = Counter()
        self._drops_unreported = 0
        self._last_drop_summary = 0.0

        pool_size = max(1, config.eventbus_worker_count)
        self._workers = [
            threading.Thread(target=self._deliver_forever, name=f"EventBus-{n}", daemon=True)
            for n in range(pool_size)
        ]
        for worker in self._workers:
            worker.start()
        logger.info("EventBus ready (workers=%d, queue=%d)", pool_size, self._queue_size)

    # --- Subscription -------------------------------------------------------

    def subscribe(self, event_name: EventType | str, callback: Listener) -> Callable[[], None]:
        """
        Register ``callback`` for a topic.

        Returns:
            A callable that removes this registration again.
        """
        topic = _topic_name(event_name)
        with self.lock:
            self.subscribers[topic].append(callback)

        def unsubscribe() -> None:
            with self.lock:
                listeners = self.subscribers.get(topic, [])
                if callback in listeners:
                    listeners.remove(callback)

        return unsubscribe

    # --- Publishing ---------------------------------------------------------

    def publish(self, event_name: EventType | str, data: Any | None = None) -> None:
        """Queue ``data`` for every listener of the topic; never blocks."""
        topic = _topic_name(event_name)
        payload = _to_plain(data)
        with self.lock:
            listeners = list(self.subscribers.get(topic, ()))

        for listener in listeners:
            try:
                self._queue.put_nowait(_Delivery(topic, listener, payload))
            except Full:
                self._note_drop(topic)
                return

    def _deliver_forever(self) -> None:
        while True:
            delivery = self._queue.get()
            try:
                delivery.listener(delivery.payload)
            except Exception as exc:
                logger.error("Listener for %s failed: %s", delivery.topic, exc)
            finally:
                self._queue.task_done()

    def _note_drop(self, topic: str) -> None:
        self._drops[topic] += 1
        self._drops_unreported += 1

        now = time.monotonic()
        if self._drops_unreported < _DROP_SUMMARY_EVERY or now - self._last_drop_summary < _DROP_SUMMARY_MIN_GAP_S:
            return
        busiest = ", ".join(f"{name}:{count}" for name, count in self._drops.most_common(5))
        logger.warning(
            "EventBus queue full (size=%d): %d events dropped in total, %d since last report [%s]. "
            "Raise SMARTFARM_EVENTBUS_QUEUE_SIZE if this persists.",
            self._queue_size,
            sum(self._drops.values()),
            self._drops_unreported,
            busiest,
        )
        self._drops_unreported = 0
        self._last_drop_summary = now

    # --- Introspection ------------------------------------------------------

    def get_metrics(self) -> Dict[str, Any]:
        """Queue and listener counters for the system health endpoint."""
        with self.lock:
            listener_count = sum(len(listeners) for listeners in self.subscribers.values())
        return {
            "queue_depth": self._queue.qsize(),
            "queue_size": self._queue_size,
            "dropped_events": sum(self._drops.values()),
            "subscribers": listener_count,
        }
