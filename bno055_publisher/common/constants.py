"""
BNO055 publisher constants only.

=============================================================================
CONVENTION QUICK REFERENCE
=============================================================================

UNITS (sensor_msgs/Imu):
  linear_acceleration: m/s²
  angular_velocity:    rad/s
  orientation:         unit quaternion, stored (w, x, y, z)

COVARIANCE:
  3x3 row-major, 9 entries. Diagonal indices 0, 4, 8; all others zero.

TIME:
  Stamps are integer nanoseconds (rclpy Clock convention).
  Periods and cooldowns are seconds.
=============================================================================
"""

# =============================================================================
# NODE WIRING
# =============================================================================

BNO_NODE_NAME = "bno055_node"
BNO_TOPIC = "imu"
BNO_FRAME_ID_PARAM = "frame_id"
BNO_DEFAULT_FRAME_ID = "imu_link"

# =============================================================================
# TIMING (seconds)
# =============================================================================

BNO_TIMER_PERIOD_SEC = 0.010  # 100 Hz sampling timer
BNO_RECONNECT_COOLDOWN_SEC = 1.0  # Sleep after a failed reconnect, inside the tick
BNO_BOOTSTRAP_RETRY_SEC = 1.0  # Sleep after a failed node construction

# =============================================================================
# COVARIANCE DIAGONALS (per axis x, y, z)
# =============================================================================

BNO_ACCEL_COVARIANCE = (67.53e-06, 67.53e-06, 67.53e-06)
BNO_GYRO_COVARIANCE = (3.05e-06, 3.05e-06, 3.05e-06)
BNO_ORIENTATION_COVARIANCE = (15.9e-03, 15.9e-03, 15.9e-03)

# =============================================================================
# COMMAND LINE
# =============================================================================

BNO_MAX_DEVICE_ADDRESS = 0xFF

