"""
Sensor capability and drivers.

The Adafruit driver adapter is not imported here; use the submodule directly:
  from bno055_publisher.sensors.bno055_i2c import BNO055I2C
"""

__all__ = []
