"""
Quiescence-window coalescing for rapid lift-slider edits.

Only the lift bounds are coalesced. Any other edit flushes whatever is pending
first, so commit order always matches submit order across fields.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Tuple

from roi_calculator.parameters import LIFT_FIELDS, ParamField

logger = logging.getLogger(__name__)

Edit = Tuple[ParamField, Any]


class EditCoalescer:
    def __init__(self, window_seconds: float = 0.15, clock: Callable[[], float] = time.monotonic):
        if window_seconds < 0:
            raise ValueError("window_seconds must be >= 0")
        self.window_seconds = window_seconds
        self._clock = clock
        # field -> (value, deadline); dict order is latest-submit order
        self._pending: Dict[ParamField, Tuple[Any, float]] = {}

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def pending_fields(self) -> List[ParamField]:
        return list(self._pending)

    def submit(self, field: ParamField, value: Any) -> List[Edit]:
        """Queue or pass through an edit; returns edits ready to commit, in order."""
        field = ParamField(field)
        if field in LIFT_FIELDS and self.window_seconds > 0:
            if self._pending.pop(field, None) is not None:
                logger.debug("Superseding pending %s edit", field.value)
            self._pending[field] = (value, self._clock() + self.window_seconds)
            return []
        return self.flush() + [(field, value)]

    def due(self) -> List[Edit]:
        """Pop pending edits whose quiescence window has elapsed."""
        now = self._clock()
        ready: List[Edit] = []
        for field, (value, deadline) in list(self._pending.items()):
            if deadline > now:
                # keep later edits behind an earlier one still waiting
                break
            ready.append((field, value))
            del self._pending[field]
        return ready

    def discard(self, field: ParamField) -> bool:
        """Drop a pending edit for field; True if one was waiting."""
        if self._pending.pop(ParamField(field), None) is None:
            return False
        logger.debug("Discarding pending %s edit", ParamField(field).value)
        return True

    def flush(self) -> List[Edit]:
        ready = [(field, value) for field, (value, _) in self._pending.items()]
        self._pending.clear()
        return ready
