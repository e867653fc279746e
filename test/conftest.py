import os
import sys
from collections import deque
from typing import Any, Callable, Dict, Iterable, List, Optional

import pytest

# Ensure local package import works for pytest collection.
_TEST_DIR = os.path.dirname(__file__)
_PKG_ROOT = os.path.abspath(os.path.join(_TEST_DIR, ".."))
if _PKG_ROOT not in sys.path:
    sys.path.insert(0, _PKG_ROOT)

from bno055_publisher.common.errors import SensorConnectionError  # noqa: E402
from bno055_publisher.common.telemetry import Quaternion, TelemetryMessage, Vector3  # noqa: E402


# =============================================================================
# Production Config Fixtures
# =============================================================================


def _load_yaml_file(path: str) -> Dict[str, Any]:
    """Load a YAML config file, handling the ros__parameters wrapper."""
    import yaml
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    # ROS2 YAML files wrap parameters in /**:/ros__parameters:
    if "/**" in data and "ros__parameters" in data.get("/**", {}):
        return data["/**"]["ros__parameters"]
    return data


@pytest.fixture
def prod_config() -> Dict[str, Any]:
    """Parameters shipped in config/bno055.yaml (what the launch file loads)."""
    config_path = os.path.join(_PKG_ROOT, "config", "bno055.yaml")
    if not os.path.exists(config_path):
        pytest.skip("config/bno055.yaml not found")
    return _load_yaml_file(config_path)


# =============================================================================
# Test Doubles
# =============================================================================


class ScriptedSensor:
    """
    SensorHandle double.

    The link is up or down. Reads raise SensorConnectionError while the link
    is down. reconnect() pops the next scripted outcome (default False) and
    sets the link accordingly.
    """

    def __init__(
        self,
        accel: Vector3 = Vector3(0.1, -0.2, 9.81),
        gyro: Vector3 = Vector3(0.01, 0.02, -0.03),
        quat: Quaternion = Quaternion(1.0, 0.0, 0.0, 0.0),
        reconnect_outcomes: Iterable[bool] = (),
    ) -> None:
        self.accel = accel
        self.gyro = gyro
        self.quat = quat
        self.link_up = True
        self.fail_on_read: Optional[str] = None
        self.reconnect_outcomes = deque(reconnect_outcomes)
        self.reads: List[str] = []
        self.reconnect_calls = 0
        self.closed = False

    def _read(self, name: str, value: Any) -> Any:
        self.reads.append(name)
        if not self.link_up or self.fail_on_read == name:
            raise SensorConnectionError(f"{name}: link down")
        return value

    def read_acceleration(self) -> Vector3:
        return self._read("accel", self.accel)

    def read_angular_velocity(self) -> Vector3:
        return self._read("gyro", self.gyro)

    def read_orientation(self) -> Quaternion:
        return self._read("quat", self.quat)

    def reconnect(self) -> bool:
        self.reconnect_calls += 1
        ok = self.reconnect_outcomes.popleft() if self.reconnect_outcomes else False
        self.link_up = ok
        if ok:
            self.fail_on_read = None
        return ok

    def close(self) -> None:
        self.closed = True


class ScriptedOpener:
    """SensorOpener double: fails `failures` times, then returns `sensor`."""

    def __init__(self, failures: int = 0, sensor: Optional[ScriptedSensor] = None) -> None:
        self.failures = failures
        self.sensor = sensor if sensor is not None else ScriptedSensor()
        self.calls: List[tuple] = []

    def __call__(self, device_path: str, address: int) -> ScriptedSensor:
        self.calls.append((device_path, address))
        if len(self.calls) <= self.failures:
            raise SensorConnectionError(f"cannot open {device_path}:0x{address:02x}")
        return self.sensor


class FakeTimer:
    def __init__(self, period_sec: float, callback: Callable[[], None]) -> None:
        self.period_sec = period_sec
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


class FakeTransport:
    """
    TelemetryTransport double: records timers and published snapshots.

    Published messages are copied at publish time because the assembler
    reuses one buffer.
    """

    def __init__(self, parameters: Optional[Dict[str, Any]] = None, start_ns: int = 1_000_000_000) -> None:
        self.parameters = dict(parameters or {})
        self.timers: List[FakeTimer] = []
        self.published: List[TelemetryMessage] = []
        self.published_ids: List[int] = []
        self._now_ns = start_ns

    def create_periodic_timer(self, period_sec: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(period_sec, callback)
        self.timers.append(timer)
        return timer

    def publish(self, msg: TelemetryMessage) -> None:
        self.published_ids.append(id(msg))
        self.published.append(
            TelemetryMessage(
                stamp_ns=msg.stamp_ns,
                frame_id=msg.frame_id,
                linear_acceleration=msg.linear_acceleration,
                angular_velocity=msg.angular_velocity,
                orientation=msg.orientation,
                linear_acceleration_covariance=msg.linear_acceleration_covariance.copy(),
                angular_velocity_covariance=msg.angular_velocity_covariance.copy(),
                orientation_covariance=msg.orientation_covariance.copy(),
            )
        )

    def get_parameter_value(self, name: str, default: Any) -> Any:
        return self.parameters.get(name, default)

    def now_ns(self) -> int:
        self._now_ns += 10_000_000
        return self._now_ns

    def tick(self, n: int = 1) -> None:
        for _ in range(n):
            for timer in self.timers:
                timer.fire()


class RecordingSleep:
    def __init__(self, on_sleep: Optional[Callable[[int], None]] = None) -> None:
        self.calls: List[float] = []
        self._on_sleep = on_sleep

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        if self._on_sleep is not None:
            self._on_sleep(len(self.calls))


@pytest.fixture
def sensor() -> ScriptedSensor:
    return ScriptedSensor()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()
