"""
=============================================================================
BNO055 NODE - I2C IMU to sensor_msgs/Imu
=============================================================================

Samples a BNO055 over I2C every 10 ms and publishes sensor_msgs/Imu on the
`imu` topic (system-default QoS). Sensor faults never stop the process:

    node level:   cannot open the device -> retry every 1 s until rclpy stops
    sample level: read fails -> reconnect(); failed reconnect -> 1 s cooldown

Usage:
    ros2 run bno055_publisher bno055_node /dev/i2c-1 0x28 --ros-args -p frame_id:=imu_link
"""

from __future__ import annotations

import sys
from typing import Any, Callable, Dict, List, Optional

import rclpy
from rclpy.logging import get_logger
from rclpy.executors import ExternalShutdownException
from rclpy.node import Node
from rclpy.parameter import Parameter
from rclpy.qos import qos_profile_system_default
from rclpy.utilities import remove_ros_args
from sensor_msgs.msg import Imu

from bno055_publisher.common.constants import BNO_NODE_NAME, BNO_TOPIC
from bno055_publisher.common.errors import SensorConnectionError
from bno055_publisher.common.telemetry import TelemetryMessage
from bno055_publisher.core.arguments import run_with_arguments
from bno055_publisher.core.publisher import DeviceArguments, TelemetryPublisher
from bno055_publisher.core.supervisor import CancellationToken, NodeSupervisor
from bno055_publisher.sensors.bno055_i2c import open_bno055
from bno055_publisher.sensors.imu_handle import SensorOpener


def fill_imu_msg(out: Imu, msg: TelemetryMessage) -> Imu:
    """Copy a TelemetryMessage into an existing sensor_msgs/Imu (no reallocation)."""
    out.header.stamp.sec, out.header.stamp.nanosec = divmod(int(msg.stamp_ns), 1_000_000_000)
    out.header.frame_id = msg.frame_id

    out.linear_acceleration.x = float(msg.linear_acceleration.x)
    out.linear_acceleration.y = float(msg.linear_acceleration.y)
    out.linear_acceleration.z = float(msg.linear_acceleration.z)

    out.angular_velocity.x = float(msg.angular_velocity.x)
    out.angular_velocity.y = float(msg.angular_velocity.y)
    out.angular_velocity.z = float(msg.angular_velocity.z)

    out.orientation.w = float(msg.orientation.w)
    out.orientation.x = float(msg.orientation.x)
    out.orientation.y = float(msg.orientation.y)
    out.orientation.z = float(msg.orientation.z)

    out.linear_acceleration_covariance = msg.linear_acceleration_covariance
    out.angular_velocity_covariance = msg.angular_velocity_covariance
    out.orientation_covariance = msg.orientation_covariance
    return out


class ImuPublisherNode(Node):
    """
    Hosts a TelemetryPublisher on rclpy: timer, publisher, parameters, clock.

    Raises SensorConnectionError if the sensor cannot be opened; the ROS node
    is destroyed before the exception leaves the constructor.
    """

    def __init__(
        self,
        device: DeviceArguments,
        open_sensor: SensorOpener = open_bno055,
        parameter_overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        overrides = None
        if parameter_overrides:
            overrides = [Parameter(k, value=v) for k, v in parameter_overrides.items()]
        super().__init__(BNO_NODE_NAME, parameter_overrides=overrides)

        self.pub = self.create_publisher(Imu, BNO_TOPIC, qos_profile_system_default)
        self._imu_msg = Imu()

        try:
            self.telemetry = TelemetryPublisher(
                transport=self,
                open_sensor=open_sensor,
                device=device,
                logger=self.get_logger(),
            )
        except SensorConnectionError:
            self.destroy_node()
            raise

        self.get_logger().info("=" * 60)
        self.get_logger().info("BNO055 IMU PUBLISHER")
        self.get_logger().info("=" * 60)
        self.get_logger().info(f"  Device:   {device.device_path} @ 0x{device.address:02x}")
        self.get_logger().info(f"  Output:   {self.pub.topic_name} (sensor_msgs/Imu)")
        self.get_logger().info(f"  Frame id: {self.telemetry.frame_id}")
        self.get_logger().info("=" * 60)

    # TelemetryTransport -------------------------------------------------------

    def create_periodic_timer(self, period_sec: float, callback: Callable[[], None]):
        return self.create_timer(period_sec, callback)

    def publish(self, msg: TelemetryMessage) -> None:
        self.pub.publish(fill_imu_msg(self._imu_msg, msg))

    def get_parameter_value(self, name: str, default: Any) -> Any:
        if not self.has_parameter(name):
            self.declare_parameter(name, default)
        return self.get_parameter(name).value

    def now_ns(self) -> int:
        return self.get_clock().now().nanoseconds

    # --------------------------------------------------------------------------

    def destroy_node(self) -> None:
        telemetry = getattr(self, "telemetry", None)
        if telemetry is not None:
            telemetry.close()
        super().destroy_node()


def _spin(node: Node) -> None:
    try:
        rclpy.spin(node)
    except (KeyboardInterrupt, ExternalShutdownException):
        pass


def _run_supervisor(device: DeviceArguments, logger: Any) -> None:
    supervisor = NodeSupervisor(
        create_node=lambda: ImuPublisherNode(device),
        spin=_spin,
        release=lambda node: node.destroy_node(),
        token=CancellationToken(rclpy.ok),
        logger=logger,
    )
    try:
        supervisor.run()
    except KeyboardInterrupt:
        pass


def main(args: Optional[List[str]] = None) -> int:
    """Entry point: bno055_node <i2c_device> <hex_address> [--ros-args ...]."""
    argv = list(sys.argv if args is None else args)
    rclpy.init(args=argv)
    logger = get_logger(BNO_NODE_NAME)

    try:
        return run_with_arguments(
            remove_ros_args(args=argv)[1:],
            lambda device: _run_supervisor(device, logger),
            logger=logger,
        )
    finally:
        rclpy.try_shutdown()


if __name__ == "__main__":
    sys.exit(main())
