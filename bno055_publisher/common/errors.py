"""
Exception types shared across the BNO055 publisher.

Only two failure kinds cross module boundaries:
- InvalidArgumentError: bad command line, fatal before any node exists.
- SensorConnectionError: the I2C link is unusable; always recoverable.
"""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Command line arguments cannot be turned into a device address."""


class SensorConnectionError(RuntimeError):
    """The sensor cannot be opened or read right now; the link may come back."""
