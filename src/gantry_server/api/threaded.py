"""Uvicorn server running on its own (non-daemon) thread.

The thread keeps the process alive after the bootstrap returns; stop()
asks uvicorn to exit and joins the thread. No timeouts are applied.
"""
from __future__ import annotations

import logging
import threading
import time

import uvicorn
from fastapi import FastAPI

from gantry.errors import LifecycleStateError
from gantry.lifecycle import Service

log = logging.getLogger("gantry.server")

_POLL_S = 0.05


class UvicornService(Service):
    def __init__(
        self,
        app: FastAPI,
        host: str,
        port: int,
        log_level: str = "warning",
        name: str | None = None,
    ):
        self.app = app
        self.host = host
        self.port = port
        self.log_level = log_level
        self._name = name or self.__class__.__name__
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._server is not None:
            raise LifecycleStateError(f"{self.name} already started")
        config = uvicorn.Config(
            self.app,
            host=self.host,
            port=self.port,
            log_level=self.log_level,
            lifespan="off",
        )
        self._server = uvicorn.Server(config)
        self._thread = threading.Thread(
            target=self._server.run, name=f"{self.name}-uvicorn"
        )
        self._thread.start()
        while not self._server.started:
            if not self._thread.is_alive():
                raise RuntimeError(
                    f"{self.name} failed to bind {self.host}:{self.port}"
                )
            time.sleep(_POLL_S)
        log.info("%s listening on %s:%s", self.name, self.host, self.port)

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.should_exit = True
        if self._thread is not None:
            self._thread.join()
        log.info("%s stopped", self.name)
