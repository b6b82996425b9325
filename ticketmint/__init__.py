"""Match ticket image and token publishing service."""

__version__ = "0.1.0"
