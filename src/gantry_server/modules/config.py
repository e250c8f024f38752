from __future__ import annotations

from gantry.graph import Binder
from gantry.modules import Module


class ConfigModule(Module):
    """Binds the process configuration under ``config``."""

    identifier = "config"

    def configure(self, binder: Binder) -> None:
        binder.bind_instance("config", binder.context.config)
