"""
Lock handling and constraint resolution.

Budget, stores, weeks and ad spend per store per week (ASW) are tied by one
identity: budget = ASW * stores * weeks. ASW is normally derived; locking it pins
its value, and after each edit the resolver overrides at most one of stores or
budget so the identity keeps holding.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Optional, Union

from roi_calculator.parameters import CampaignParameters, LockTarget, ParamField, round_half_up

logger = logging.getLogger(__name__)

MAX_LOCKED = 2


class LockSet:
    """At most two of {budget, stores, ASW}; a locked ASW carries its pinned value."""

    def __init__(self, targets: Iterable[Union[LockTarget, str]] = (), locked_asw_value: Optional[float] = None):
        self._targets: set = set()
        self.locked_asw_value: Optional[float] = None
        for t in targets:
            target = LockTarget(t)
            if target is LockTarget.AD_SPEND_PER_STORE_WEEK:
                if locked_asw_value is None:
                    raise ValueError("Locking ad_spend_per_store_week requires locked_asw_value")
                self.lock_asw(locked_asw_value)
            else:
                self.lock(target)

    def __contains__(self, target) -> bool:
        return LockTarget(target) in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self):
        return iter(sorted(self._targets, key=lambda t: t.value))

    def __repr__(self) -> str:
        names = ", ".join(t.value for t in self)
        return f"LockSet({{{names}}}, locked_asw_value={self.locked_asw_value!r})"

    @property
    def targets(self) -> FrozenSet[LockTarget]:
        return frozenset(self._targets)

    @property
    def asw_locked(self) -> bool:
        return LockTarget.AD_SPEND_PER_STORE_WEEK in self._targets

    def can_lock(self, target: LockTarget) -> bool:
        return target in self._targets or len(self._targets) < MAX_LOCKED

    def lock(self, target: LockTarget) -> bool:
        """Returns False (and changes nothing) when the lock would over-constrain."""
        target = LockTarget(target)
        if target is LockTarget.AD_SPEND_PER_STORE_WEEK:
            raise ValueError("Use lock_asw() so the pinned value is captured")
        if not self.can_lock(target):
            logger.debug("Rejected lock on %s: already locked %s", target.value, sorted(t.value for t in self._targets))
            return False
        self._targets.add(target)
        return True

    def lock_asw(self, value: float) -> bool:
        target = LockTarget.AD_SPEND_PER_STORE_WEEK
        if not self.can_lock(target):
            logger.debug("Rejected ASW lock: already locked %s", sorted(t.value for t in self._targets))
            return False
        if target not in self._targets:
            self._targets.add(target)
            self.locked_asw_value = float(value)
        return True

    def unlock(self, target: LockTarget) -> None:
        target = LockTarget(target)
        self._targets.discard(target)
        if target is LockTarget.AD_SPEND_PER_STORE_WEEK:
            self.locked_asw_value = None


@dataclass(frozen=True)
class Override:
    field: ParamField
    value: float


def _stores_for(budget: float, asw: float, weeks: int) -> Optional[int]:
    denom = asw * weeks
    if denom <= 0:
        return None
    return max(1, round_half_up(budget / denom))


def _budget_for(asw: float, stores: int, weeks: int) -> float:
    return max(0.0, round(asw * stores * weeks, 2))


def resolve_constraints(
    params: CampaignParameters,
    locks: LockSet,
    effective_asw: float,
) -> Optional[Override]:
    """Decide which single field, if any, to override after an edit.

    Only acts when ASW is locked. Weeks edits drive stores, falling back to
    budget when stores is locked. Budget edits drive stores, stores edits drive
    budget, each only while the driven field is unlocked. Returns None when the
    recomputed value equals the stored one.
    """
    edited = params.last_edited
    if edited is None or not locks.asw_locked:
        return None

    stores_free = LockTarget.STORES not in locks
    budget_free = LockTarget.BUDGET not in locks
    override: Optional[Override] = None

    if edited is ParamField.WEEKS:
        if stores_free:
            new_stores = _stores_for(params.budget, effective_asw, params.weeks)
            if new_stores is not None:
                override = Override(ParamField.STORES, new_stores)
        elif budget_free:
            override = Override(ParamField.BUDGET, _budget_for(effective_asw, params.stores, params.weeks))
    elif edited is ParamField.BUDGET and stores_free:
        new_stores = _stores_for(params.budget, effective_asw, params.weeks)
        if new_stores is not None:
            override = Override(ParamField.STORES, new_stores)
    elif edited is ParamField.STORES and budget_free:
        override = Override(ParamField.BUDGET, _budget_for(effective_asw, params.stores, params.weeks))

    if override is None:
        return None
    current = getattr(params, override.field.value)
    if override.value == current:
        return None
    logger.debug(
        "ASW pinned at %.4f: %s edit overrides %s %s -> %s",
        effective_asw, edited.value, override.field.value, current, override.value,
    )
    return override
