"""
Telemetry data model and assembler.

ROS-free: the node layer copies a TelemetryMessage into sensor_msgs/Imu.
Covariances are built once and frozen (numpy arrays with writeable=False).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from bno055_publisher.common.constants import (
    BNO_ACCEL_COVARIANCE,
    BNO_DEFAULT_FRAME_ID,
    BNO_GYRO_COVARIANCE,
    BNO_ORIENTATION_COVARIANCE,
)


@dataclass(frozen=True)
class Vector3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


@dataclass(frozen=True)
class Quaternion:
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


def make_diagonal_covariance(diagonal: Sequence[float]) -> np.ndarray:
    """
    Build a read-only 3x3 covariance in row-major order (9 entries).

    Indices 0, 4, 8 take diagonal[0..2]; every other entry is zero.
    """
    if len(diagonal) != 3:
        raise ValueError(f"covariance diagonal needs 3 entries, got {len(diagonal)}")
    cov = np.zeros(9, dtype=np.float64)
    cov[0::4] = np.asarray(diagonal, dtype=np.float64)
    cov.flags.writeable = False
    return cov


@dataclass
class TelemetryMessage:
    stamp_ns: int = 0
    frame_id: str = BNO_DEFAULT_FRAME_ID
    linear_acceleration: Vector3 = field(default_factory=Vector3)
    angular_velocity: Vector3 = field(default_factory=Vector3)
    orientation: Quaternion = field(default_factory=Quaternion)
    linear_acceleration_covariance: np.ndarray = field(
        default_factory=lambda: make_diagonal_covariance(BNO_ACCEL_COVARIANCE)
    )
    angular_velocity_covariance: np.ndarray = field(
        default_factory=lambda: make_diagonal_covariance(BNO_GYRO_COVARIANCE)
    )
    orientation_covariance: np.ndarray = field(
        default_factory=lambda: make_diagonal_covariance(BNO_ORIENTATION_COVARIANCE)
    )


class TelemetryAssembler:
    """
    Shapes one cycle's readings into the outbound message.

    The assembler owns a single TelemetryMessage buffer; assemble() refreshes
    it in place and returns it. The publisher must consume it before the next
    call (rclpy publish() serializes synchronously).
    """

    def __init__(
        self,
        accel_covariance: Sequence[float] = BNO_ACCEL_COVARIANCE,
        gyro_covariance: Sequence[float] = BNO_GYRO_COVARIANCE,
        orientation_covariance: Sequence[float] = BNO_ORIENTATION_COVARIANCE,
    ) -> None:
        self._msg = TelemetryMessage(
            linear_acceleration_covariance=make_diagonal_covariance(accel_covariance),
            angular_velocity_covariance=make_diagonal_covariance(gyro_covariance),
            orientation_covariance=make_diagonal_covariance(orientation_covariance),
        )

    @property
    def message(self) -> TelemetryMessage:
        return self._msg

    def assemble(
        self,
        stamp_ns: int,
        frame_id: str,
        accel: Vector3,
        gyro: Vector3,
        quat: Quaternion,
    ) -> TelemetryMessage:
        msg = self._msg
        msg.stamp_ns = int(stamp_ns)
        msg.frame_id = frame_id
        msg.linear_acceleration = accel
        msg.angular_velocity = gyro
        msg.orientation = quat
        return msg
