"""
CalculatorSession: the single stateful object the presentation layer talks to.

Every edit runs to completion before returning: clamp, recompute, resolve,
apply at most one override, recompute once more. No further propagation.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from roi_calculator.coalescing import EditCoalescer
from roi_calculator.constraints import LockSet, Override, resolve_constraints
from roi_calculator.metrics_engine import DEFAULT_THRESHOLDS, DerivedMetrics, FeedbackThresholds, compute_metrics
from roi_calculator.parameters import (
    MAX_LIFT,
    MAX_WEEKS,
    CampaignParameters,
    LockTarget,
    ParamField,
    clamp_edit,
)

logger = logging.getLogger(__name__)

DEFAULT_LOCKS = (LockTarget.BUDGET, LockTarget.STORES)


@dataclass(frozen=True)
class EditResult:
    parameters: CampaignParameters
    metrics: DerivedMetrics


@dataclass(frozen=True)
class SessionSnapshot:
    parameters: CampaignParameters
    lock_set: frozenset
    locked_asw_value: Optional[float]
    metrics: DerivedMetrics
    last_override: Optional[Override]


class CalculatorSession:
    def __init__(
        self,
        parameters: Optional[CampaignParameters] = None,
        locked: Iterable[Union[LockTarget, str]] = DEFAULT_LOCKS,
        thresholds: FeedbackThresholds = DEFAULT_THRESHOLDS,
        max_weeks: int = MAX_WEEKS,
        max_lift: float = MAX_LIFT,
        coalesce_window_seconds: float = 0.15,
        clock=None,
    ):
        self.parameters = parameters.copy() if parameters is not None else CampaignParameters()
        self.parameters.last_edited = None
        self.thresholds = thresholds
        self.max_weeks = max_weeks
        self.max_lift = max_lift
        self.locks = LockSet()
        self.last_override: Optional[Override] = None
        self._coalescer = EditCoalescer(coalesce_window_seconds, clock=clock or time.monotonic)

        self.metrics = compute_metrics(self.parameters, self.thresholds)
        for target in locked:
            self.set_lock(LockTarget(target), True)

    # ------------------------------------------------------------------
    # edits
    # ------------------------------------------------------------------

    def apply_edit(self, field: Union[ParamField, str], value: Any) -> EditResult:
        """Commit an edit now.

        A pending coalesced edit for the same field is superseded; pending edits
        for other fields are committed first so order is preserved.
        """
        field = ParamField(field)
        self._coalescer.discard(field)
        for pending_field, pending_value in self._coalescer.flush():
            self._apply(pending_field, pending_value)
        return self._apply(field, value)

    def _apply(self, field: ParamField, value: Any) -> EditResult:
        params = self.parameters
        clamped = clamp_edit(field, value, params, self.max_weeks, self.max_lift)
        if clamped != value:
            logger.debug("Clamped %s edit %r -> %r", field.value, value, clamped)
        setattr(params, field.value, clamped)
        params.last_edited = field

        self.metrics = compute_metrics(params, self.thresholds)

        effective_asw = self.locks.locked_asw_value if self.locks.asw_locked else self.metrics.ad_spend_per_store_week
        override = resolve_constraints(params, self.locks, effective_asw)
        if override is not None:
            setattr(params, override.field.value, override.value)
            self.metrics = compute_metrics(params, self.thresholds)
        self.last_override = override

        # cleared every cycle, override or not
        params.last_edited = None
        return EditResult(parameters=params.copy(), metrics=self.metrics)

    def submit_edit(self, field: Union[ParamField, str], value: Any) -> Optional[EditResult]:
        """Route an edit through the lift coalescer; commits whatever is ready."""
        return self._commit(self._coalescer.submit(ParamField(field), value))

    def commit_due(self) -> Optional[EditResult]:
        return self._commit(self._coalescer.due())

    def flush_pending(self) -> Optional[EditResult]:
        return self._commit(self._coalescer.flush())

    @property
    def has_pending_edits(self) -> bool:
        return self._coalescer.has_pending

    def _commit(self, edits) -> Optional[EditResult]:
        result = None
        for field, value in edits:
            result = self._apply(field, value)
        return result

    # ------------------------------------------------------------------
    # locks
    # ------------------------------------------------------------------

    def set_lock(self, target: Union[LockTarget, str], locked: bool) -> frozenset:
        """Lock or unlock a target. Over-constraining requests are silent no-ops."""
        target = LockTarget(target)
        if not locked:
            self.locks.unlock(target)
        elif target is LockTarget.AD_SPEND_PER_STORE_WEEK:
            self.locks.lock_asw(self.metrics.ad_spend_per_store_week)
        else:
            self.locks.lock(target)
        return self.locks.targets

    def toggle_lock(self, target: Union[LockTarget, str]) -> frozenset:
        target = LockTarget(target)
        return self.set_lock(target, target not in self.locks)

    def can_lock(self, target: Union[LockTarget, str]) -> bool:
        return self.locks.can_lock(LockTarget(target))

    # ------------------------------------------------------------------

    def get_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            parameters=self.parameters.copy(),
            lock_set=self.locks.targets,
            locked_asw_value=self.locks.locked_asw_value,
            metrics=self.metrics,
            last_override=self.last_override,
        )
