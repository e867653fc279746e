"""
Common package: constants, errors and the telemetry data model.

Nothing here imports rclpy.
"""
