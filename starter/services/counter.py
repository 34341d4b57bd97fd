"""Per-visitor counter kept in the signed cookie session."""

from __future__ import annotations

import logging
from typing import MutableMapping

logger = logging.getLogger("starter.counter")

COUNTER_KEY = "counter"


class CounterStore:
    def __init__(self, session: MutableMapping[str, object]) -> None:
        self.session = session

    @property
    def counter(self) -> int:
        value = self.session.get(COUNTER_KEY, 0)
        return value if isinstance(value, int) else 0

    def increase(self) -> int:
        value = self.counter + 1
        self.session[COUNTER_KEY] = value
        logger.debug("counter.increase", extra={"extra_data": {"counter": value}})
        return value

    def reset(self) -> int:
        self.session[COUNTER_KEY] = 0
        return 0
