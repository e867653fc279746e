"""
ROS 2 host node. Importing this package requires rclpy and sensor_msgs.
"""
