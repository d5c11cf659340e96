# -*- coding: utf-8 -*-
"""
Single-slot observable holding the latest DecodingResult.

- Last value wins; nothing is accumulated.
- A new subscriber immediately receives the current value (if any).
- After close() publications are dropped, so work finishing after the consumer
  went away is silently discarded.
- Observers run on the publishing thread but outside the lock, so a slow
  observer never stalls another publisher. Deliveries from different threads
  may interleave; `value` always holds the last published result.
"""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from .results import DecodingResult

logger = logging.getLogger(__name__)

Observer = Callable[[DecodingResult], None]


class Subscription:
    def __init__(self, channel: "ResultChannel", observer: Observer) -> None:
        self._channel = channel
        self.observer = observer

    def close(self) -> None:
        self._channel.unsubscribe(self.observer)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class ResultChannel:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: Optional[DecodingResult] = None
        self._observers: List[Observer] = []
        self._closed = False

    @property
    def value(self) -> Optional[DecodingResult]:
        with self._lock:
            return self._value

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def publish(self, result: DecodingResult) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Channel closed, dropping %s", result)
                return
            self._value = result
            observers = list(self._observers)
        for observer in observers:
            self._deliver(observer, result)

    def subscribe(self, observer: Observer) -> Subscription:
        with self._lock:
            self._observers.append(observer)
            replay = None if self._closed else self._value
        if replay is not None:
            self._deliver(observer, replay)
        return Subscription(self, observer)

    def unsubscribe(self, observer: Observer) -> None:
        with self._lock:
            try:
                self._observers.remove(observer)
            except ValueError:
                pass

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._observers.clear()

    @staticmethod
    def _deliver(observer: Observer, result: DecodingResult) -> None:
        try:
            observer(result)
        except Exception:
            logger.exception("Observer %r failed on %s", observer, result)
