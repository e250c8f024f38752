"""Shutdown snapshot and the process-termination hook.

The hook is armed once (atexit + termination signals) and runs at most
once per process: it stops every snapshot handle in capture order,
logging stop failures without letting them escape. An optional
``on_complete`` callback runs once after the stops (context teardown).
"""
from __future__ import annotations

import atexit
import logging
import signal
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Tuple

from gantry.errors import (
    LifecycleStateError,
    ShutdownError,
    validate_error_type,
)
from gantry.events import EventBus, ServiceStopFailed, ServiceStopped

from .service import ServiceHandle, ServiceState

log = logging.getLogger("gantry.lifecycle")

DEFAULT_SIGNALS = ("SIGTERM", "SIGINT")


@dataclass(frozen=True)
class ShutdownSnapshot:
    handles: Tuple[ServiceHandle, ...]

    @classmethod
    def capture(cls, handles: Iterable[ServiceHandle]) -> "ShutdownSnapshot":
        return cls(
            tuple(h for h in handles if h.state is ServiceState.STARTED)
        )

    def __len__(self) -> int:
        return len(self.handles)


class ShutdownHook:
    def __init__(
        self,
        snapshot: ShutdownSnapshot,
        events: EventBus | None = None,
        signals: Iterable[str] = DEFAULT_SIGNALS,
        register_exit: Callable[[Callable[[], Any]], Any] = atexit.register,
        on_complete: Callable[[], Any] | None = None,
    ):
        self.snapshot = snapshot
        self._events = events
        self._signals = tuple(signals)
        self._register_exit = register_exit
        self._on_complete = on_complete
        self._lock = threading.Lock()
        self._armed = False
        self._ran = False
        self._previous: Dict[int, Any] = {}

    @property
    def armed(self) -> bool:
        return self._armed

    @property
    def ran(self) -> bool:
        return self._ran

    def arm(self) -> None:
        if self._armed:
            raise LifecycleStateError("Shutdown hook already armed")
        self._armed = True
        self._register_exit(self.run)
        if threading.current_thread() is not threading.main_thread():
            if self._signals:
                log.warning(
                    "shutdown hook armed off the main thread; "
                    "signal handlers not installed (atexit only)"
                )
            return
        for sig_name in self._signals:
            signum = getattr(signal, sig_name, None)
            if signum is None:
                log.warning("unknown signal %s ignored", sig_name)
                continue
            self._previous[signum] = signal.signal(signum, self._on_signal)

    def _on_signal(self, signum: int, frame: Any) -> None:  # noqa: ARG002
        log.info("received %s", signal.Signals(signum).name)
        self._restore_signals()
        self.run()

    def _restore_signals(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            return
        for signum, prev in self._previous.items():
            signal.signal(signum, prev)
        self._previous.clear()

    def run(self) -> bool:
        """Stop snapshot services; returns False when already run."""
        # non-blocking: a signal may land while atexit holds the lock
        if not self._lock.acquire(blocking=False):
            return False
        try:
            if self._ran:
                return False
            self._ran = True
        finally:
            self._lock.release()
        log.info(
            "*** Shutting down %d service(s) since process is terminating",
            len(self.snapshot),
        )
        for handle in self.snapshot.handles:
            try:
                handle.stop()
            except ShutdownError as e:
                log.warning("%s", e, exc_info=e.__cause__)
                self._emit(
                    ServiceStopFailed(
                        handle.name,
                        handle.role.value,
                        validate_error_type(e.error_type),
                        str(e.__cause__ or e),
                    )
                )
                continue
            except Exception as e:  # noqa: BLE001
                # illegal state or a bug in the handle; keep going
                log.warning("Error stopping %s: %s", handle.name, e)
                continue
            self._emit(ServiceStopped(handle.name, handle.role.value))
        log.info("*** Services shut down")
        if self._on_complete is not None:
            try:
                self._on_complete()
            except Exception:  # noqa: BLE001
                log.warning(
                    "shutdown completion callback failed", exc_info=True
                )
        return True

    def _emit(self, ev) -> None:
        if self._events is None:
            return
        try:
            self._events.emit(ev)
        except Exception:  # noqa: BLE001
            log.debug("event emit failed during shutdown", exc_info=True)


__all__ = ["ShutdownSnapshot", "ShutdownHook", "DEFAULT_SIGNALS"]
