"""
Sample-level state machine: one call per timer tick.

SAMPLING   -> read accel, gyro, quaternion; publish one message.
RECOVERING -> reconnect(); on failure sleep the cooldown inside the tick.

The three reads share one failure path so a message never mixes samples
from both sides of a disconnect.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import time
from typing import Any, Callable, Optional

from bno055_publisher.common.constants import BNO_RECONNECT_COOLDOWN_SEC
from bno055_publisher.common.errors import SensorConnectionError
from bno055_publisher.common.telemetry import TelemetryAssembler, TelemetryMessage
from bno055_publisher.sensors.imu_handle import SensorHandle

_logger = logging.getLogger(__name__)


class SampleState(Enum):
    SAMPLING = "sampling"
    RECOVERING = "recovering"


class SampleEvent(Enum):
    READ_OK = "read_ok"
    READ_FAILED = "read_failed"
    RECONNECT_OK = "reconnect_ok"
    RECONNECT_FAILED = "reconnect_failed"


_SAMPLE_TRANSITIONS: dict[tuple[SampleState, SampleEvent], SampleState] = {
    (SampleState.SAMPLING, SampleEvent.READ_OK): SampleState.SAMPLING,
    (SampleState.SAMPLING, SampleEvent.READ_FAILED): SampleState.RECOVERING,
    (SampleState.RECOVERING, SampleEvent.RECONNECT_OK): SampleState.SAMPLING,
    (SampleState.RECOVERING, SampleEvent.RECONNECT_FAILED): SampleState.RECOVERING,
}


def next_sample_state(state: SampleState, event: SampleEvent) -> SampleState:
    """Pure transition function. Raises ValueError on an impossible pair."""
    try:
        return _SAMPLE_TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"no sample transition from {state.name} on {event.name}") from None


@dataclass
class SampleCycleStats:
    ticks: int = 0
    published: int = 0
    read_failures: int = 0
    reconnect_attempts: int = 0
    reconnect_failures: int = 0


class SampleCycle:
    """
    Timer callback body.

    Collaborators are injected so the cycle runs without a bus or scheduler:
      sensor  - SensorHandle
      publish - callable taking the TelemetryMessage (consumed synchronously)
      now_ns  - clock in integer nanoseconds
      sleep   - blocking sleep in seconds (cooldown)
    """

    def __init__(
        self,
        sensor: SensorHandle,
        assembler: TelemetryAssembler,
        publish: Callable[[TelemetryMessage], None],
        now_ns: Callable[[], int],
        frame_id: str,
        sleep: Callable[[float], None] = time.sleep,
        cooldown_sec: float = BNO_RECONNECT_COOLDOWN_SEC,
        logger: Optional[Any] = None,
    ) -> None:
        self._sensor = sensor
        self._assembler = assembler
        self._publish = publish
        self._now_ns = now_ns
        self._frame_id = frame_id
        self._sleep = sleep
        self._cooldown_sec = float(cooldown_sec)
        self._log = logger if logger is not None else _logger
        self.state = SampleState.SAMPLING
        self.stats = SampleCycleStats()
        self._recovered = False

    @property
    def frame_id(self) -> str:
        return self._frame_id

    def __call__(self) -> None:
        self.tick()

    def tick(self) -> None:
        self.stats.ticks += 1
        if self.state is SampleState.SAMPLING:
            self._sample()
        else:
            self._recover()

    def _sample(self) -> None:
        try:
            accel = self._sensor.read_acceleration()
            gyro = self._sensor.read_angular_velocity()
            quat = self._sensor.read_orientation()
        except SensorConnectionError as exc:
            self.stats.read_failures += 1
            self.state = next_sample_state(self.state, SampleEvent.READ_FAILED)
            self._log.error(f"Sensor connection is lost ({exc}). Trying to reconnect...")
            self._recover()
            return

        msg = self._assembler.assemble(self._now_ns(), self._frame_id, accel, gyro, quat)
        self._publish(msg)
        self.stats.published += 1
        self.state = next_sample_state(self.state, SampleEvent.READ_OK)

        if self._recovered:
            self._recovered = False
            self._log.info(
                f"Sensor sampling resumed: accel=({accel.x:.3f}, {accel.y:.3f}, {accel.z:.3f}), "
                f"gyro=({gyro.x:.3f}, {gyro.y:.3f}, {gyro.z:.3f})"
            )

    def _recover(self) -> None:
        self.stats.reconnect_attempts += 1
        if self._sensor.reconnect():
            self.state = next_sample_state(self.state, SampleEvent.RECONNECT_OK)
            self._recovered = True
            self._log.info("Sensor reconnected; sampling resumes on the next tick.")
            return

        self.stats.reconnect_failures += 1
        self.state = next_sample_state(self.state, SampleEvent.RECONNECT_FAILED)
        self._log.warning(f"Sensor reconnect failed; cooling down {self._cooldown_sec:.1f}s.")
        self._sleep(self._cooldown_sec)
