"""
BNO055 SensorHandle on the Adafruit CircuitPython driver.

adafruit_bno055 owns the register protocol (chip id, NDOF mode, scaling);
adafruit_extended_bus opens an arbitrary /dev/i2c-N bus. This adapter only
maps the driver's tuples onto Vector3/Quaternion and turns bus errors into
SensorConnectionError.

Both libraries are imported when the bus is opened, so the module can be
imported on hosts without Blinka support.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Sequence

from bno055_publisher.common.errors import SensorConnectionError
from bno055_publisher.common.telemetry import Quaternion, Vector3

_I2C_DEVICE_RE = re.compile(r"^(?:/dev/i2c-)?(\d+)$")


def parse_bus_number(device: str) -> int:
    """"/dev/i2c-1" or "1" -> 1."""
    match = _I2C_DEVICE_RE.match(str(device).strip())
    if match is None:
        raise SensorConnectionError(f"{device!r} is not an i2c-dev bus (expected /dev/i2c-N)")
    return int(match.group(1))


def _default_i2c_factory(bus: int) -> Any:
    from adafruit_extended_bus import ExtendedI2C

    return ExtendedI2C(bus)


def _default_sensor_factory(i2c: Any, address: int) -> Any:
    import adafruit_bno055

    return adafruit_bno055.BNO055_I2C(i2c, address=address)


def _complete(values: Optional[Sequence[Optional[float]]], name: str, n: int) -> Sequence[float]:
    # The driver returns None entries while the fusion core is still starting.
    if values is None or len(values) != n or any(v is None for v in values):
        raise SensorConnectionError(f"BNO055 {name} sample incomplete: {values!r}")
    return values


class BNO055I2C:
    """
    BNO055 (9-axis, on-chip fusion) over Linux i2c-dev.
    - device: /dev/i2c-X path (or bus number)
    - i2c address: 0x28 (COM3 low) or 0x29 (COM3 high)
    - outputs: accel [m/s^2], gyro [rad/s], orientation quaternion (w, x, y, z)

    The constructor opens the bus; it raises SensorConnectionError if the
    device does not answer.
    """

    def __init__(
        self,
        device: str,
        addr: int,
        i2c_factory: Callable[[int], Any] = _default_i2c_factory,
        sensor_factory: Callable[[Any, int], Any] = _default_sensor_factory,
    ):
        self.device = device
        self.addr = int(addr)
        self._i2c_factory = i2c_factory
        self._sensor_factory = sensor_factory
        self.i2c: Any = None
        self.sensor: Any = None
        self._open()

    def _open(self) -> None:
        bus = parse_bus_number(self.device)
        try:
            self.i2c = self._i2c_factory(bus)
            self.sensor = self._sensor_factory(self.i2c, self.addr)
        except (OSError, RuntimeError) as exc:
            # RuntimeError: adafruit_bno055 "bad chip id"
            self._close_bus()
            raise SensorConnectionError(
                f"BNO055 at {self.device}:0x{self.addr:02x} not reachable: {exc}"
            ) from exc

    def _close_bus(self) -> None:
        self.sensor = None
        if self.i2c is None:
            return
        try:
            self.i2c.deinit()
        except OSError:
            pass
        self.i2c = None

    def close(self) -> None:
        self._close_bus()

    def _read(self, name: str) -> Any:
        if self.sensor is None:
            raise SensorConnectionError("BNO055 bus is closed")
        try:
            return getattr(self.sensor, name)
        except OSError as exc:
            raise SensorConnectionError(f"BNO055 {name} read failed: {exc}") from exc

    def read_acceleration(self) -> Vector3:
        x, y, z = _complete(self._read("acceleration"), "acceleration", 3)
        return Vector3(float(x), float(y), float(z))

    def read_angular_velocity(self) -> Vector3:
        x, y, z = _complete(self._read("gyro"), "gyro", 3)
        return Vector3(float(x), float(y), float(z))

    def read_orientation(self) -> Quaternion:
        w, x, y, z = _complete(self._read("quaternion"), "quaternion", 4)
        return Quaternion(float(w), float(x), float(y), float(z))

    def reconnect(self) -> bool:
        self._close_bus()
        try:
            self._open()
        except SensorConnectionError:
            return False
        return True


def open_bno055(device: str, addr: int) -> BNO055I2C:
    """SensorOpener for the production driver."""
    return BNO055I2C(device, addr)
