from __future__ import annotations

import logging
import time
from typing import Protocol

logger = logging.getLogger(__name__)


class PhaseObserver(Protocol):
    """
    Advisory hooks around named build phases ("total time", "z12", ...).

    Observers never influence results.
    """

    def start(self, phase: str) -> None: ...

    def stop(self, phase: str, suffix: str = "") -> None: ...

    def debug(self, message: str) -> None: ...


class NullObserver:
    def start(self, phase: str) -> None:
        pass

    def stop(self, phase: str, suffix: str = "") -> None:
        pass

    def debug(self, message: str) -> None:
        pass


class TimingObserver:
    """
    Measures phase durations; subclasses decide where a finished phase goes.
    """

    def __init__(self) -> None:
        self._started: dict[str, float] = {}

    def start(self, phase: str) -> None:
        self._started[phase] = time.perf_counter()

    def stop(self, phase: str, suffix: str = "") -> None:
        t0 = self._started.pop(phase, None)
        if t0 is None:
            return
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        self.finished(phase, elapsed_ms, suffix)

    def finished(self, phase: str, elapsed_ms: float, suffix: str) -> None:
        message = format_timer(phase, elapsed_ms, suffix)
        self.debug(message)

    def debug(self, message: str) -> None:
        pass


class LoggingObserver(TimingObserver):
    def __init__(self, log: logging.Logger | None = None) -> None:
        super().__init__()
        self.log = log or logger

    def debug(self, message: str) -> None:
        self.log.debug(message)


class CompositeObserver:
    def __init__(self, *observers: PhaseObserver) -> None:
        self.observers = observers

    def start(self, phase: str) -> None:
        for o in self.observers:
            o.start(phase)

    def stop(self, phase: str, suffix: str = "") -> None:
        for o in self.observers:
            o.stop(phase, suffix)

    def debug(self, message: str) -> None:
        for o in self.observers:
            o.debug(message)


def format_timer(phase: str, elapsed_ms: float, suffix: str = "") -> str:
    ms = round(elapsed_ms, 3)
    if suffix:
        return f"Timer: {phase} {suffix} took {ms}ms"
    return f"Timer: {phase} took {ms}ms"
