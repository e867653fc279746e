"""
BNO055 IMU publisher launch file.

    ros2 launch bno055_publisher bno055.launch.py device:=/dev/i2c-1 address:=0x28

Parameters come from config/bno055.yaml; frame_id can be overridden here.
"""

import os

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration
from launch_ros.actions import Node

from ament_index_python.packages import get_package_share_directory


def generate_launch_description():
    """Generate launch description for the BNO055 publisher."""
    config_path = os.path.join(get_package_share_directory("bno055_publisher"), "config", "bno055.yaml")

    device_arg = DeclareLaunchArgument(
        "device",
        default_value="/dev/i2c-1",
        description="I2C bus device path",
    )
    address_arg = DeclareLaunchArgument(
        "address",
        default_value="0x28",
        description="BNO055 I2C address in hex (0x28 or 0x29)",
    )
    frame_id_arg = DeclareLaunchArgument(
        "frame_id",
        default_value="imu_link",
        description="frame_id stamped on every sensor_msgs/Imu",
    )

    imu_node = Node(
        package="bno055_publisher",
        executable="bno055_node",
        name="bno055_node",
        output="screen",
        arguments=[LaunchConfiguration("device"), LaunchConfiguration("address")],
        parameters=[config_path, {"frame_id": LaunchConfiguration("frame_id")}],
    )

    return LaunchDescription([device_arg, address_arg, frame_id_arg, imu_node])
