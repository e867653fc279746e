from setuptools import find_packages, setup

package_name = "bno055_publisher"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        ("share/" + package_name + "/launch", ["launch/bno055.launch.py"]),
        ("share/" + package_name + "/config", ["config/bno055.yaml"]),
    ],
    install_requires=[
        "setuptools",
        "numpy",
        "adafruit-circuitpython-bno055",
        "adafruit-extended-bus",
    ],
    extras_require={"test": ["pytest", "pyyaml"]},
    zip_safe=True,
    maintainer="Will Haber",
    maintainer_email="whab13@mit.edu",
    description="BNO055 9-axis IMU over I2C published as sensor_msgs/Imu with automatic reconnect (ROS 2)",
    license="Apache-2.0",
    entry_points={
        "console_scripts": [
            "bno055_node = bno055_publisher.node.imu_publisher_node:main",
        ],
    },
)
