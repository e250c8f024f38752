"""gantry: module assembly, service lifecycle and bootstrap container."""

__version__ = "0.1.0"
