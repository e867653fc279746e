"""
Command line for bno055_node: <i2c_device> <hex_address>.

ROS arguments are stripped before these helpers see argv. A bad command line
is the only fatal error: run_with_arguments() returns exit status 1 without
starting anything.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, Sequence

from bno055_publisher.common.constants import BNO_MAX_DEVICE_ADDRESS
from bno055_publisher.common.errors import InvalidArgumentError
from bno055_publisher.core.publisher import DeviceArguments

_logger = logging.getLogger(__name__)

USAGE = "usage: bno055_node <i2c_device> <hex_address>  (e.g. /dev/i2c-1 0x28)"

# ASCII hex digits only; int(..., 16) alone would also take "2_8" and non-ASCII digits.
_HEX_RE = re.compile(r"^(?:0[xX])?[0-9a-fA-F]+$")


def parse_device_address(text: str) -> int:
    """Parse a hexadecimal I2C address ("28", "0x28") into 0..255."""
    stripped = str(text).strip()
    if not _HEX_RE.match(stripped):
        raise InvalidArgumentError(f'Argument "{text}" is not a proper I2C address!')
    value = int(stripped, 16)
    if value > BNO_MAX_DEVICE_ADDRESS:
        raise InvalidArgumentError(f"Device I2C address {text!r} is not valid (0x00..0xff)!")
    return value


def parse_device_arguments(argv: Sequence[str]) -> DeviceArguments:
    """
    Parse the two positional arguments (ROS arguments already removed).

    argv excludes the program name: [device_path, hex_address].
    """
    if len(argv) != 2:
        raise InvalidArgumentError(f"Invalid command line arguments! {USAGE}")
    device_path, address_text = argv
    return DeviceArguments(device_path=str(device_path), address=parse_device_address(address_text))


def run_with_arguments(
    argv: Sequence[str],
    start: Callable[[DeviceArguments], None],
    logger: Optional[Any] = None,
) -> int:
    """Parse argv and hand the device to start(); exit status 1 on a bad command line."""
    log = logger if logger is not None else _logger
    try:
        device = parse_device_arguments(argv)
    except InvalidArgumentError as exc:
        log.error(str(exc))
        return 1
    start(device)
    return 0
