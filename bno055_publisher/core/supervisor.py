"""
Node-level state machine: keep trying to build a publisher, then spin it.

BOOTSTRAPPING --NODE_CREATED--> RUNNING --SPIN_FINISHED--> SHUTTING_DOWN
BOOTSTRAPPING --NODE_FAILED---> BOOTSTRAPPING (after the retry delay)
BOOTSTRAPPING --STOP_REQUESTED-> SHUTTING_DOWN

The "keep running" condition is a CancellationToken passed in explicitly;
it is checked before every bootstrap attempt. Spin observes shutdown itself.
"""

from __future__ import annotations

from enum import Enum
import logging
import time
from typing import Any, Callable, Generic, Optional, TypeVar

from bno055_publisher.common.constants import BNO_BOOTSTRAP_RETRY_SEC
from bno055_publisher.common.errors import SensorConnectionError

_logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


class SupervisorState(Enum):
    BOOTSTRAPPING = "bootstrapping"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class SupervisorEvent(Enum):
    NODE_CREATED = "node_created"
    NODE_FAILED = "node_failed"
    STOP_REQUESTED = "stop_requested"
    SPIN_FINISHED = "spin_finished"


_SUPERVISOR_TRANSITIONS: dict[tuple[SupervisorState, SupervisorEvent], SupervisorState] = {
    (SupervisorState.BOOTSTRAPPING, SupervisorEvent.NODE_CREATED): SupervisorState.RUNNING,
    (SupervisorState.BOOTSTRAPPING, SupervisorEvent.NODE_FAILED): SupervisorState.BOOTSTRAPPING,
    (SupervisorState.BOOTSTRAPPING, SupervisorEvent.STOP_REQUESTED): SupervisorState.SHUTTING_DOWN,
    (SupervisorState.RUNNING, SupervisorEvent.SPIN_FINISHED): SupervisorState.SHUTTING_DOWN,
    (SupervisorState.RUNNING, SupervisorEvent.STOP_REQUESTED): SupervisorState.SHUTTING_DOWN,
}


def next_supervisor_state(state: SupervisorState, event: SupervisorEvent) -> SupervisorState:
    """Pure transition function. Raises ValueError on an impossible pair."""
    try:
        return _SUPERVISOR_TRANSITIONS[(state, event)]
    except KeyError:
        raise ValueError(f"no supervisor transition from {state.name} on {event.name}") from None


class CancellationToken:
    """
    Process-wide "should keep running" flag, passed explicitly.

    Wraps an optional predicate (rclpy.ok in production) and a local stop flag
    that tests can set deterministically.
    """

    def __init__(self, predicate: Optional[Callable[[], bool]] = None) -> None:
        self._predicate = predicate
        self._stopped = False

    def cancel(self) -> None:
        self._stopped = True

    @property
    def cancelled(self) -> bool:
        if self._stopped:
            return True
        return self._predicate is not None and not self._predicate()

    def ok(self) -> bool:
        return not self.cancelled


class NodeSupervisor(Generic[NodeT]):
    """
    Drives the node lifecycle.

      create_node - builds one node; raises SensorConnectionError if the sensor
                    cannot be opened (the partial node must already be released)
      spin        - blocks until the scheduler stops
      release     - destroys the node (timer, channel, sensor)
    """

    def __init__(
        self,
        create_node: Callable[[], NodeT],
        spin: Callable[[NodeT], None],
        release: Callable[[NodeT], None],
        token: CancellationToken,
        sleep: Callable[[float], None] = time.sleep,
        retry_delay_sec: float = BNO_BOOTSTRAP_RETRY_SEC,
        logger: Optional[Any] = None,
    ) -> None:
        self._create_node = create_node
        self._spin = spin
        self._release = release
        self._token = token
        self._sleep = sleep
        self._retry_delay_sec = float(retry_delay_sec)
        self._log = logger if logger is not None else _logger
        self.state = SupervisorState.BOOTSTRAPPING
        self.attempts = 0

    def _advance(self, event: SupervisorEvent) -> None:
        self.state = next_supervisor_state(self.state, event)

    def _bootstrap(self) -> Optional[NodeT]:
        while self.state is SupervisorState.BOOTSTRAPPING:
            if self._token.cancelled:
                self._advance(SupervisorEvent.STOP_REQUESTED)
                return None
            self.attempts += 1
            try:
                node = self._create_node()
            except SensorConnectionError as exc:
                self._advance(SupervisorEvent.NODE_FAILED)
                self._log.error(f"Cannot connect to I2C device (attempt {self.attempts}): {exc}")
                self._sleep(self._retry_delay_sec)
                continue
            self._advance(SupervisorEvent.NODE_CREATED)
            return node
        return None

    def run(self) -> Optional[NodeT]:
        """Bootstrap, spin, shut down. Returns the node that ran, if any."""
        node = self._bootstrap()
        try:
            if node is not None:
                self._log.info(f"Sensor node up after {self.attempts} attempt(s).")
                try:
                    self._spin(node)
                finally:
                    self._advance(SupervisorEvent.SPIN_FINISHED)
        finally:
            if node is not None:
                self._release(node)
        return node
