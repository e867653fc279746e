"""
Telemetry publisher: owns one sensor, one timer, one outbound channel.

Construction order matters:
  1. open the sensor (failure propagates, nothing else is created)
  2. resolve frame_id from the parameter surface
  3. build the assembler (covariances fixed here, never touched again)
  4. register SampleCycle on the periodic timer
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Any, Callable, Optional, Protocol

from bno055_publisher.common.constants import (
    BNO_DEFAULT_FRAME_ID,
    BNO_FRAME_ID_PARAM,
    BNO_RECONNECT_COOLDOWN_SEC,
    BNO_TIMER_PERIOD_SEC,
)
from bno055_publisher.common.telemetry import TelemetryAssembler, TelemetryMessage
from bno055_publisher.core.sample_cycle import SampleCycle
from bno055_publisher.sensors.imu_handle import SensorHandle, SensorOpener

_logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class TelemetryTransport(Protocol):
    """Scheduler, channel, parameters and clock as seen by the publisher."""

    def create_periodic_timer(self, period_sec: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def publish(self, msg: TelemetryMessage) -> None:
        ...

    def get_parameter_value(self, name: str, default: Any) -> Any:
        ...

    def now_ns(self) -> int:
        ...


@dataclass(frozen=True)
class DeviceArguments:
    device_path: str
    address: int


class TelemetryPublisher:
    def __init__(
        self,
        transport: TelemetryTransport,
        open_sensor: SensorOpener,
        device: DeviceArguments,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[Any] = None,
    ) -> None:
        self._log = logger if logger is not None else _logger
        self._timer: Optional[TimerHandle] = None
        self.device = device

        self.sensor: Optional[SensorHandle] = open_sensor(device.device_path, device.address)

        self.frame_id = str(transport.get_parameter_value(BNO_FRAME_ID_PARAM, BNO_DEFAULT_FRAME_ID))
        self.assembler = TelemetryAssembler()
        self.cycle = SampleCycle(
            sensor=self.sensor,
            assembler=self.assembler,
            publish=transport.publish,
            now_ns=transport.now_ns,
            frame_id=self.frame_id,
            sleep=sleep,
            cooldown_sec=BNO_RECONNECT_COOLDOWN_SEC,
            logger=self._log,
        )
        self._timer = transport.create_periodic_timer(BNO_TIMER_PERIOD_SEC, self.cycle)

    @property
    def timer(self) -> Optional[TimerHandle]:
        return self._timer

    def close(self) -> None:
        """Cancel the timer and release the sensor. Safe to call twice."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self.sensor is not None:
            self.sensor.close()
            self.sensor = None
