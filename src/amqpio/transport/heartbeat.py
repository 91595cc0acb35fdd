"""
AMQP Heartbeat Monitor

This module derives keep-alive actions from the transport's last read and
last write timestamps. The client sends a heartbeat once nothing has been
written for half the negotiated interval, and presumes the peer dead once
nothing has been read for twice the interval.
"""

import logging
import time
from enum import Enum
from typing import Optional

from ..exceptions import AMQPValidationException
from ..utils import round_seconds

logger = logging.getLogger(__name__)


class HeartbeatAction(Enum):
    """Outcome of a single monitor pass"""

    NONE = 'none'
    SEND_HEARTBEAT = 'send_heartbeat'
    RECONNECT = 'reconnect'


class HeartbeatMonitor:
    """
    Heartbeat staleness evaluator.

    Holds the configured interval and the interval currently in force. An
    interval of 0 disables monitoring; ``reenable`` restores the configured
    value after a temporary ``disable``.
    """

    def __init__(self, interval: float = 0):
        if interval < 0:
            raise AMQPValidationException(
                f'Invalid heartbeat interval: {interval} (must be >= 0)',
                field_name='heartbeat',
                field_value=str(interval),
                validation_rule='non_negative',
            )
        self.interval = interval
        self.initial_interval = interval

    @property
    def enabled(self) -> bool:
        return self.interval != 0

    def disable(self) -> None:
        self.interval = 0

    def reenable(self) -> None:
        self.interval = self.initial_interval

    def evaluate(
        self,
        last_read_at: Optional[float],
        last_write_at: Optional[float],
        now: Optional[float] = None,
    ) -> HeartbeatAction:
        """
        Decide what the transport must do to honour the heartbeat contract.

        Both staleness values are measured against the same instant and rounded
        to whole seconds. A dead peer outranks a due heartbeat: when both hold,
        only RECONNECT is returned.

        Args:
            last_read_at: Wall-clock time of the last successful read, or None
            last_write_at: Wall-clock time of the last successful write, or None
            now: Current wall-clock time (defaults to time.time())

        Returns:
            The action to take
        """
        # No baseline until both a read and a write have happened
        if not self.interval or not last_read_at or not last_write_at:
            return HeartbeatAction.NONE

        if now is None:
            now = time.time()

        read_staleness = round_seconds(now - last_read_at)
        write_staleness = round_seconds(now - last_write_at)

        if self.interval * 2 < read_staleness:
            logger.debug(
                f'Nothing read for {read_staleness}s (heartbeat {self.interval}s)'
            )
            return HeartbeatAction.RECONNECT

        if self.interval / 2 < write_staleness:
            return HeartbeatAction.SEND_HEARTBEAT

        return HeartbeatAction.NONE

    def __repr__(self) -> str:
        return (
            f'HeartbeatMonitor(interval={self.interval}, '
            f'initial_interval={self.initial_interval})'
        )
