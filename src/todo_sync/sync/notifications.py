# src/todo_sync/sync/notifications.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class NoticeKind(StrEnum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(slots=True, frozen=True)
class Notice:
    kind: NoticeKind
    text: str


NoticeListener = Callable[[Notice], None]
BusyListener = Callable[[bool], None]


class NotificationRouter:
    """
    NotificationSink implementation: forwards notices to subscribers.

    It only routes. Display (toasts, console lines, ...) belongs to whoever
    subscribes. A crashing subscriber is logged and does not stop the others.
    """

    def __init__(self) -> None:
        self._listeners: list[NoticeListener] = []

    def subscribe(self, listener: NoticeListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners.remove(listener)

        return _unsubscribe

    def emit(self, notice: Notice) -> None:
        level = logging.WARNING if notice.kind is NoticeKind.ERROR else logging.INFO
        logger.log(level, "[%s] %s", notice.kind.value, notice.text)
        for listener in list(self._listeners):
            try:
                listener(notice)
            except Exception:
                logger.exception("Notice listener failed.")

    def info(self, text: str) -> None:
        self.emit(Notice(NoticeKind.INFO, text))

    def success(self, text: str) -> None:
        self.emit(Notice(NoticeKind.SUCCESS, text))

    def error(self, text: str) -> None:
        self.emit(Notice(NoticeKind.ERROR, text))


class BusyCounter:
    """
    Counted "busy" signal for a loading indicator.

    Listeners hear only idle -> busy and busy -> idle transitions, so the
    signal stays on for as long as any tracked call is in flight.
    """

    def __init__(self) -> None:
        self._in_flight = 0
        self._listeners: list[BusyListener] = []

    @property
    def busy(self) -> bool:
        return self._in_flight > 0

    @property
    def in_flight(self) -> int:
        return self._in_flight

    def subscribe(self, listener: BusyListener) -> None:
        self._listeners.append(listener)

    def _publish(self, busy: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(busy)
            except Exception:
                logger.exception("Busy listener failed.")

    def begin(self) -> None:
        self._in_flight += 1
        if self._in_flight == 1:
            self._publish(True)

    def end(self) -> None:
        if self._in_flight == 0:
            logger.warning("BusyCounter.end() without matching begin()")
            return
        self._in_flight -= 1
        if self._in_flight == 0:
            self._publish(False)

    @contextlib.contextmanager
    def track(self) -> Iterator[None]:
        self.begin()
        try:
            yield
        finally:
            self.end()
