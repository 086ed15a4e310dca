"""Data models for appliance selections."""
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from appliances import (
    APPLIANCES,
    FAN_APPLIANCE_IDS,
    get_display_name,
    get_variants,
    has_variants,
    is_solo_only,
)


@dataclass(frozen=True)
class VariantSelection:
    """Quantity chosen for one size variant of an appliance."""

    variant_id: str
    quantity: int


@dataclass(frozen=True)
class CustomEquipment:
    """User-declared item that is not in the catalog."""

    id: str
    name: str
    wattage: float
    quantity: int = 1


@dataclass(frozen=True)
class SelectionState:
    """Snapshot of everything the user has switched on.

    ``quantities`` holds non-variant appliances only; variant-bearing
    appliances are tracked through ``variant_selections`` and their own
    on/off flag is derived, never stored. Zero quantities are pruned.
    """

    quantities: Dict[str, int] = field(default_factory=dict)
    variant_selections: Dict[str, Tuple[VariantSelection, ...]] = field(default_factory=dict)
    custom_equipment: Tuple[CustomEquipment, ...] = ()

    def appliance_quantity(self, appliance_id: str) -> int:
        """Quantity of an appliance; 1/0 for variant-bearing appliances."""
        if has_variants(appliance_id):
            return 1 if self.active_variant_ids(appliance_id) else 0
        return self.quantities.get(appliance_id, 0)

    def variant_quantity(self, appliance_id: str, variant_id: str) -> int:
        for selection in self.variant_selections.get(appliance_id, ()):
            if selection.variant_id == variant_id:
                return selection.quantity
        return 0

    def active_variant_ids(self, appliance_id: str) -> List[str]:
        """Active variant ids of an appliance, in catalog order."""
        chosen = {s.variant_id for s in self.variant_selections.get(appliance_id, ()) if s.quantity > 0}
        return [variant_id for variant_id in get_variants(appliance_id) if variant_id in chosen]

    def is_active(self, item_id: str) -> bool:
        """Whether an appliance id or variant id is currently switched on."""
        if item_id in APPLIANCES:
            return self.appliance_quantity(item_id) > 0
        return any(
            s.variant_id == item_id and s.quantity > 0
            for selections in self.variant_selections.values()
            for s in selections
        )

    def active_heavy_duty_ids(self) -> List[str]:
        """Active heavy-duty appliance ids and heavy-duty variant ids."""
        ids = []
        for appliance_id, data in APPLIANCES.items():
            if not data["heavy_duty"]:
                continue
            if has_variants(appliance_id):
                ids.extend(self.active_variant_ids(appliance_id))
            elif self.quantities.get(appliance_id, 0) > 0:
                ids.append(appliance_id)
        return ids

    def has_solo_active(self) -> bool:
        return any(is_solo_only(item_id) for item_id in self.active_heavy_duty_ids())

    def has_heavy_duty_selected(self) -> bool:
        return bool(self.active_heavy_duty_ids())

    def has_fans_selected(self) -> bool:
        return any(self.appliance_quantity(fan_id) > 0 for fan_id in FAN_APPLIANCE_IDS)

    def heavy_duty_names(self) -> List[str]:
        return [get_display_name(item_id) for item_id in self.active_heavy_duty_ids()]

    def active_count(self) -> int:
        """Number of active line items (appliances, variants and custom equipment)."""
        appliance_count = sum(
            1 for appliance_id, qty in self.quantities.items()
            if qty > 0 and not has_variants(appliance_id)
        )
        variant_count = sum(
            1 for selections in self.variant_selections.values()
            for s in selections if s.quantity > 0
        )
        return appliance_count + variant_count + len(self.custom_equipment)

    def is_empty(self) -> bool:
        return self.active_count() == 0

