"""
SensorHandle capability.

Anything that offers the three reads plus reconnect() can drive the publisher.
Reads raise SensorConnectionError when the link is lost; reconnect() never
raises and reports the outcome as a bool.
"""

from __future__ import annotations

from typing import Callable, Protocol

from bno055_publisher.common.telemetry import Quaternion, Vector3


class SensorHandle(Protocol):
    def read_acceleration(self) -> Vector3:
        ...

    def read_angular_velocity(self) -> Vector3:
        ...

    def read_orientation(self) -> Quaternion:
        ...

    def reconnect(self) -> bool:
        ...

    def close(self) -> None:
        ...


# (device_path, address) -> open handle; raises SensorConnectionError on failure.
SensorOpener = Callable[[str, int], SensorHandle]
