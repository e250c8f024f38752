from __future__ import annotations

from gantry.graph import Binder
from gantry.modules import Module


class MetricsModule(Module):
    """Binds the context's metric registry under ``metrics``."""

    identifier = "metrics"

    def configure(self, binder: Binder) -> None:
        binder.bind_instance("metrics", binder.context.metrics)
