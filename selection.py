"""Selection state transitions.

Every user intent (quantity change, variant change, override, bulk switch-off,
reset) is a function that takes the current SelectionState and returns a new
one. Nothing here raises for unknown ids or odd quantities: unknown ids are
no-ops and negative quantities are treated as zero.
"""
import logging
import uuid
from dataclasses import replace

from appliances import (
    APPLIANCES,
    ESSENTIAL_APPLIANCE_IDS,
    allows_multiple,
    default_variant_id,
    get_appliance,
    get_parent_id,
    get_variants,
    has_variants,
    is_heavy_duty,
)
from compatibility import can_activate
from models import CustomEquipment, SelectionState, VariantSelection

_LOGGER = logging.getLogger(__name__)


def initial_state():
    """Empty selection: nothing switched on, no custom equipment."""
    return SelectionState()


def reset(state=None):
    """Discard every selection, including custom equipment."""
    return initial_state()


def _clamp(quantity):
    return max(0, int(quantity))


def _with_quantity(state, appliance_id, quantity):
    quantities = dict(state.quantities)
    if quantity > 0:
        quantities[appliance_id] = quantity
    else:
        quantities.pop(appliance_id, None)
    return replace(state, quantities=quantities)


def _with_variants(state, appliance_id, selections):
    variant_selections = dict(state.variant_selections)
    kept = tuple(s for s in selections if s.quantity > 0)
    if kept:
        variant_selections[appliance_id] = kept
    else:
        variant_selections.pop(appliance_id, None)
    return replace(state, variant_selections=variant_selections)


def _clear_heavy_duty(state):
    """Switch off every heavy-duty appliance and heavy-duty variant."""
    quantities = {
        appliance_id: qty for appliance_id, qty in state.quantities.items()
        if not is_heavy_duty(appliance_id)
    }
    variant_selections = {
        appliance_id: selections for appliance_id, selections in state.variant_selections.items()
        if not is_heavy_duty(appliance_id)
    }
    return replace(state, quantities=quantities, variant_selections=variant_selections)


def _admit(state, candidate_id):
    """Make room for a heavy-duty candidate.

    When the compatibility rules reject the candidate, the existing heavy-duty
    selection is dropped so the latest choice wins.
    """
    admission = can_activate(candidate_id, state)
    if admission.allowed:
        return state

    _LOGGER.debug(
        "Replacing heavy-duty selection %s with %s (%s)",
        state.active_heavy_duty_ids(), candidate_id, admission.reason,
    )
    return _clear_heavy_duty(state)


def set_quantity(state, appliance_id, quantity):
    """Set the quantity of a catalog appliance.

    Heavy-duty appliances are on/off (quantity 1). A solo-only appliance
    switches every other heavy-duty item off; any other heavy-duty appliance
    is added next to the current selection when the compatibility rules allow
    it and replaces it otherwise.
    """
    appliance = get_appliance(appliance_id)
    if appliance is None:
        return state

    quantity = _clamp(quantity)

    if has_variants(appliance_id):
        if quantity == 0:
            return _with_variants(state, appliance_id, ())
        # The parent flag follows its variants; switch on the default size
        if state.appliance_quantity(appliance_id) > 0:
            return state
        return set_variant_quantity(state, appliance_id, default_variant_id(appliance_id), 1)

    if quantity == 0 or not appliance["heavy_duty"]:
        return _with_quantity(state, appliance_id, quantity)

    if appliance.get("solo_only"):
        _LOGGER.debug("Solo appliance %s selected, clearing heavy-duty load", appliance_id)
        return _with_quantity(_clear_heavy_duty(state), appliance_id, 1)

    return _with_quantity(_admit(state, appliance_id), appliance_id, 1)


def set_variant_quantity(state, appliance_id, variant_id, quantity):
    """Set the quantity of one variant of an appliance.

    Single-choice appliances (``allow_multiple`` false) drop the previously
    chosen variant. Switching on a new heavy-duty variant follows the same
    replace-on-conflict policy as :func:`set_quantity`.
    """
    if not has_variants(appliance_id) or variant_id not in get_variants(appliance_id):
        return state

    quantity = _clamp(quantity)
    current = state.variant_selections.get(appliance_id, ())

    if quantity == 0:
        return _with_variants(state, appliance_id, [s for s in current if s.variant_id != variant_id])

    if not allows_multiple(appliance_id):
        state = _with_variants(state, appliance_id, [s for s in current if s.variant_id == variant_id])

    if is_heavy_duty(variant_id) and not state.is_active(variant_id):
        state = _admit(state, variant_id)

    current = state.variant_selections.get(appliance_id, ())
    if any(s.variant_id == variant_id for s in current):
        updated = [
            VariantSelection(variant_id, quantity) if s.variant_id == variant_id else s
            for s in current
        ]
    else:
        updated = [*current, VariantSelection(variant_id, quantity)]
    return _with_variants(state, appliance_id, updated)


def force_activate(state, item_id):
    """Switch an appliance or variant on, ignoring the compatibility rules.

    This is the confirmed-override path: nothing else is switched off, except
    that a single-choice appliance still holds only one variant.
    """
    if item_id in APPLIANCES:
        if not has_variants(item_id):
            if state.quantities.get(item_id, 0) > 0:
                return state
            _LOGGER.debug("Forcing %s on alongside %s", item_id, state.active_heavy_duty_ids())
            return _with_quantity(state, item_id, 1)
        if state.appliance_quantity(item_id) > 0:
            return state
        item_id = default_variant_id(item_id)

    parent_id = get_parent_id(item_id)
    if parent_id is None or state.is_active(item_id):
        return state

    _LOGGER.debug("Forcing %s on alongside %s", item_id, state.active_heavy_duty_ids())
    current = state.variant_selections.get(parent_id, ()) if allows_multiple(parent_id) else ()
    return _with_variants(state, parent_id, [*current, VariantSelection(item_id, 1)])


def bulk_deactivate_non_essentials(state):
    """Switch off everything that is neither essential nor heavy-duty."""
    def keep(appliance_id):
        return appliance_id in ESSENTIAL_APPLIANCE_IDS or is_heavy_duty(appliance_id)

    quantities = {
        appliance_id: qty for appliance_id, qty in state.quantities.items() if keep(appliance_id)
    }
    variant_selections = {
        appliance_id: selections for appliance_id, selections in state.variant_selections.items()
        if keep(appliance_id)
    }
    _LOGGER.debug("Turned off non-essential appliances")
    return replace(state, quantities=quantities, variant_selections=variant_selections)


def bulk_deactivate(state, item_ids):
    """Switch off every appliance (or variant) in ``item_ids``."""
    for item_id in item_ids:
        if item_id in APPLIANCES:
            state = set_quantity(state, item_id, 0)
        else:
            parent_id = get_parent_id(item_id)
            if parent_id:
                state = set_variant_quantity(state, parent_id, item_id, 0)
    return state


def add_custom_equipment(state, name, wattage, quantity=1, equipment_id=None):
    """Add a user-declared appliance. Blank names or non-positive values are ignored."""
    name = (name or "").strip()
    quantity = _clamp(quantity)
    if not name or wattage is None or wattage <= 0 or quantity == 0:
        return state

    equipment = CustomEquipment(
        id=equipment_id or f"custom_{uuid.uuid4().hex[:8]}",
        name=name,
        wattage=wattage,
        quantity=quantity,
    )
    return replace(state, custom_equipment=(*state.custom_equipment, equipment))


def remove_custom_equipment(state, equipment_id):
    return replace(
        state,
        custom_equipment=tuple(eq for eq in state.custom_equipment if eq.id != equipment_id),
    )


def set_custom_equipment_quantity(state, equipment_id, quantity):
    """Change a custom item's quantity; zero or less removes it."""
    quantity = _clamp(quantity)
    if quantity == 0:
        return remove_custom_equipment(state, equipment_id)
    return replace(
        state,
        custom_equipment=tuple(
            replace(eq, quantity=quantity) if eq.id == equipment_id else eq
            for eq in state.custom_equipment
        ),
    )
