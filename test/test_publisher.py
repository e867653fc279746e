"""
TelemetryPublisher construction contract: open first, no timer on failure,
frame_id from parameters, 10 ms timer driving the sample cycle.
"""

import pytest

from conftest import FakeTransport, RecordingSleep, ScriptedOpener, ScriptedSensor

from bno055_publisher.common import constants
from bno055_publisher.common.errors import SensorConnectionError
from bno055_publisher.core.publisher import DeviceArguments, TelemetryPublisher

DEVICE = DeviceArguments(device_path="/dev/i2c-1", address=0x28)


def test_successful_construction(transport):
    opener = ScriptedOpener()
    pub = TelemetryPublisher(transport, opener, DEVICE, sleep=RecordingSleep())

    assert opener.calls == [("/dev/i2c-1", 0x28)]
    assert len(transport.timers) == 1
    assert transport.timers[0].period_sec == pytest.approx(0.010)
    assert pub.timer is transport.timers[0]
    assert pub.frame_id == "imu_link"


def test_open_failure_registers_no_timer(transport):
    opener = ScriptedOpener(failures=1)
    with pytest.raises(SensorConnectionError):
        TelemetryPublisher(transport, opener, DEVICE)
    assert transport.timers == []
    assert transport.published == []


def test_frame_id_from_parameters():
    transport = FakeTransport(parameters={"frame_id": "chassis_imu"})
    TelemetryPublisher(transport, ScriptedOpener(), DEVICE, sleep=RecordingSleep())
    transport.tick()
    assert transport.published[0].frame_id == "chassis_imu"


def test_prod_config_frame_id_matches_default(prod_config):
    assert prod_config["frame_id"] == constants.BNO_DEFAULT_FRAME_ID


def test_timer_drives_publishing(transport):
    sensor = ScriptedSensor()
    TelemetryPublisher(transport, ScriptedOpener(sensor=sensor), DEVICE, sleep=RecordingSleep())
    transport.tick(3)
    assert len(transport.published) == 3
    assert transport.published[-1].linear_acceleration == sensor.accel


def test_close_releases_timer_and_sensor(transport):
    sensor = ScriptedSensor()
    pub = TelemetryPublisher(transport, ScriptedOpener(sensor=sensor), DEVICE)
    timer = pub.timer

    pub.close()
    pub.close()

    assert timer.cancelled
    assert sensor.closed
    assert pub.timer is None
    assert pub.sensor is None
    transport.tick()
    assert transport.published == []


@pytest.mark.parametrize("failures", [0, 1, 5])
def test_failed_attempts_leave_no_state(failures):
    """N discarded attempts do not change how attempt N+1 behaves."""
    opener = ScriptedOpener(failures=failures)
    transport = FakeTransport()

    for _ in range(failures):
        with pytest.raises(SensorConnectionError):
            TelemetryPublisher(transport, opener, DEVICE)

    pub = TelemetryPublisher(transport, opener, DEVICE, sleep=RecordingSleep())
    assert len(opener.calls) == failures + 1
    assert len(transport.timers) == 1
    transport.tick()
    assert len(transport.published) == 1
    assert pub.cycle.stats.published == 1
