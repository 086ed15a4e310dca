"""Heavy-duty compatibility rules.

Decides whether a heavy-duty appliance (or variant) may be switched on next
to what is already running. This is a query only; the selection functions
decide what to do with a rejection.
"""
from dataclasses import dataclass
from typing import Optional

from appliances import (
    allows_multiple,
    can_combine,
    default_variant_id,
    get_parent_id,
    get_variants,
    has_variants,
    is_heavy_duty,
    is_solo_only,
)
from models import SelectionState

REASON_SOLO_SELECTED = "Solo appliance selected"
REASON_MUST_BE_ALONE = "Must be used alone"
REASON_MAX_TWO = "Max 2 heavy-duty"
REASON_NOT_COMPATIBLE = "Not compatible"

MAX_HEAVY_DUTY = 2


@dataclass(frozen=True)
class Admission:
    """Outcome of a compatibility check.

    ``decision`` is "proceed" when the item can simply be switched on and
    "confirm" when switching it on needs the user's explicit override.
    """

    allowed: bool
    reason: Optional[str] = None

    @property
    def decision(self) -> str:
        return "proceed" if self.allowed else "confirm"

    def __bool__(self) -> bool:
        return self.allowed


ALLOWED = Admission(True)


def can_activate(candidate_id: str, state: SelectionState) -> Admission:
    """Check whether ``candidate_id`` may be switched on in ``state``.

    Sizes of a single-choice appliance are judged against the selection as it
    would be after the current size is replaced.
    """
    if has_variants(candidate_id):
        if state.appliance_quantity(candidate_id) > 0:
            return ALLOWED
        candidate_id = default_variant_id(candidate_id)

    if not candidate_id or not is_heavy_duty(candidate_id):
        return ALLOWED

    # Deactivation is always permitted
    if state.is_active(candidate_id):
        return ALLOWED

    active = state.active_heavy_duty_ids()

    # Siblings of a single-choice appliance get replaced, so they don't count
    parent_id = get_parent_id(candidate_id)
    if parent_id and not allows_multiple(parent_id):
        siblings = set(get_variants(parent_id))
        active = [item_id for item_id in active if item_id not in siblings]

    if any(is_solo_only(item_id) for item_id in active):
        return Admission(False, REASON_SOLO_SELECTED)

    if is_solo_only(candidate_id) and active:
        return Admission(False, REASON_MUST_BE_ALONE)

    if len(active) >= MAX_HEAVY_DUTY:
        return Admission(False, REASON_MAX_TWO)

    if len(active) == 1 and not can_combine(active[0], candidate_id):
        return Admission(False, REASON_NOT_COMPATIBLE)

    return ALLOWED
