"""rulectl — rule expression evaluation for cluster resource constraints."""

__version__ = "0.1.0"
