"""
BNO055 IMU publisher for ROS 2.

Subpackages:
- common/:  constants, errors, telemetry message + assembler (ROS-free)
- sensors/: SensorHandle capability and the Adafruit BNO055 adapter
- core/:    sample-cycle and node-supervisor state machines (ROS-free)
- node/:    rclpy host node and console entry point

ROS-dependent modules are not imported here so that the core can be imported
and tested without a ROS environment.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "TelemetryAssembler",
    "TelemetryMessage",
    "SampleCycle",
    "TelemetryPublisher",
    "NodeSupervisor",
    "CancellationToken",
]

_LAZY_ATTRS: dict[str, tuple[str, str]] = {
    "TelemetryAssembler": ("bno055_publisher.common.telemetry", "TelemetryAssembler"),
    "TelemetryMessage": ("bno055_publisher.common.telemetry", "TelemetryMessage"),
    "SampleCycle": ("bno055_publisher.core.sample_cycle", "SampleCycle"),
    "TelemetryPublisher": ("bno055_publisher.core.publisher", "TelemetryPublisher"),
    "NodeSupervisor": ("bno055_publisher.core.supervisor", "NodeSupervisor"),
    "CancellationToken": ("bno055_publisher.core.supervisor", "CancellationToken"),
}


def __getattr__(name: str) -> Any:
    target = _LAZY_ATTRS.get(name)
    if target is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr_name = target
    module = import_module(module_name)
    return getattr(module, attr_name)


def __dir__() -> list[str]:
    return sorted(set(globals().keys()) | set(_LAZY_ATTRS.keys()))
