"""Load and inverter sizing calculations."""

import math

from appliances import (
    AC_APPLIANCE_IDS,
    APPLIANCES,
    CATEGORIES,
    HEATING_APPLIANCE_IDS,
    REFRIGERATION_APPLIANCE_IDS,
    get_combination_warnings,
    get_parent_id,
    get_variant,
    get_variants,
    has_variants,
    is_solo_only,
)
from constants import (
    HIGH_SURGE_MULTIPLIER,
    INVERTER_SIZES,
    POWER_FACTOR,
    SAFETY_MARGIN,
    SURGE_DIVERSITY,
    SURGE_DOMINANCE_RATIO,
    VENTILATION_KVA_THRESHOLD,
)


def _round_watts(value: float) -> int:
    # Half-up, matching how the figures are shown to users
    return int(math.floor(value + 0.5))


def _in_family(item_id: str, family: set) -> bool:
    return item_id in family or get_parent_id(item_id) in family


def get_active_items(state) -> list:
    """Active catalog items in catalog order, variants in place of their parent."""
    items = []
    for appliance_id, data in APPLIANCES.items():
        if has_variants(appliance_id):
            variants = get_variants(appliance_id)
            for variant_id in state.active_variant_ids(appliance_id):
                variant = variants[variant_id]
                items.append({
                    "id": variant_id,
                    "name": f"{data['name']} {variant['label']}",
                    "category": data["category"],
                    "wattage": variant["wattage"],
                    "surge": variant["surge"],
                    "quantity": state.variant_quantity(appliance_id, variant_id),
                    "heavy_duty": data["heavy_duty"],
                })
        elif state.quantities.get(appliance_id, 0) > 0:
            items.append({
                "id": appliance_id,
                "name": data["name"],
                "category": data["category"],
                "wattage": data["wattage"],
                "surge": data["surge"],
                "quantity": state.quantities[appliance_id],
                "heavy_duty": data["heavy_duty"],
            })
    return items


def build_load_table(state) -> list:
    """One row per active appliance, variant and custom item."""
    rows = []
    for item in get_active_items(state):
        rows.append({
            **item,
            "category_name": CATEGORIES[item["category"]]["name"],
            "total_watts": item["wattage"] * item["quantity"],
            "custom": False,
        })
    for eq in state.custom_equipment:
        rows.append({
            "id": eq.id,
            "name": eq.name,
            "category": "custom",
            "category_name": "Custom Equipment",
            "wattage": eq.wattage,
            "surge": 1,
            "quantity": eq.quantity,
            "heavy_duty": False,
            "total_watts": eq.wattage * eq.quantity,
            "custom": True,
        })
    return rows


def load_by_category(rows: list) -> dict:
    """Sum running watts per category name, keeping first-seen order."""
    totals = {}
    for row in rows:
        totals[row["category_name"]] = totals.get(row["category_name"], 0) + row["total_watts"]
    return totals


def select_inverter_size(required_kva: float) -> tuple:
    """Smallest standard inverter that covers the requirement.

    Returns (size_kva, undersized). When nothing is big enough the largest
    size is returned with undersized=True.
    """
    for size in INVERTER_SIZES:
        if size >= required_kva:
            return size, False
    return INVERTER_SIZES[-1], True


def calculate_load(state) -> dict:
    """Turn a selection into a recommended inverter size.

    Running load plus half of the single worst motor surge, with a 20% safety
    margin, converted to kVA at a 0.8 power factor.
    """
    items = get_active_items(state)

    catalog_load = sum(item["wattage"] * item["quantity"] for item in items)
    custom_load = sum(eq.wattage * eq.quantity for eq in state.custom_equipment)
    total_load = catalog_load + custom_load

    # Extra startup watts above running draw; custom equipment has no surge data
    surge_candidates = [
        item["wattage"] * (item["surge"] - 1) * item["quantity"]
        for item in items
        if item["surge"] > 1
    ]
    peak_surge = max(surge_candidates) if surge_candidates else 0

    adjusted_surge = peak_surge * SURGE_DIVERSITY
    required_power = (total_load + adjusted_surge) * SAFETY_MARGIN
    required_kva = required_power / (1000 * POWER_FACTOR)

    recommended_inverter, undersized = select_inverter_size(required_kva)

    heavy_duty_ids = state.active_heavy_duty_ids()

    # Warnings
    warnings = []

    has_ac = any(_in_family(item_id, AC_APPLIANCE_IDS) for item_id in heavy_duty_ids)
    has_fridge = any(_in_family(item_id, REFRIGERATION_APPLIANCE_IDS) for item_id in heavy_duty_ids)
    has_heating = any(state.appliance_quantity(appliance_id) > 0 for appliance_id in HEATING_APPLIANCE_IDS)

    if has_ac and has_fridge:
        warnings.append("Running AC and refrigerator together increases load significantly.")

    if has_heating:
        warnings.append("Heating appliances significantly reduce battery backup time.")

    if adjusted_surge > total_load * SURGE_DOMINANCE_RATIO:
        warnings.append("High motor startup load detected. Consider a higher inverter capacity.")

    warnings.extend(get_combination_warnings(heavy_duty_ids))

    for item_id in heavy_duty_ids:
        if not is_solo_only(item_id):
            continue
        if item_id in APPLIANCES:
            name = APPLIANCES[item_id]["name"]
        else:
            variant = get_variant(item_id)
            name = f"{variant['label']} {APPLIANCES[variant['parent_id']]['name']}"
        warnings.append(f"{name} should be used alone for optimal performance.")

    if state.custom_equipment:
        warnings.append("Custom equipment wattage values are estimates. Verify with manufacturer specs.")

    if undersized:
        warnings.append(
            f"Required capacity of {required_kva:.2f} kVA exceeds the largest standard inverter "
            f"({recommended_inverter} kVA). Split the load or consult an inverter engineer."
        )

    # Recommendations
    recommendations = []

    if total_load > 0:
        recommendations.append(f"Recommended inverter: {recommended_inverter} kVA for optimal performance")

        high_surge = next((item for item in items if item["surge"] >= HIGH_SURGE_MULTIPLIER), None)
        if high_surge:
            peak_kw = high_surge["wattage"] * high_surge["surge"] / 1000
            recommendations.append(
                f"{high_surge['name']} has high startup surge. "
                f"Ensure inverter can handle {peak_kw:.1f} kW peak."
            )

        if required_kva > VENTILATION_KVA_THRESHOLD:
            recommendations.append("Large load detected - ensure proper ventilation for inverter")

    return {
        "total_load": _round_watts(total_load),
        "peak_surge": _round_watts(peak_surge),
        "adjusted_surge": _round_watts(adjusted_surge),
        "required_power": _round_watts(required_power),
        "required_kva": round(required_kva, 2),
        "recommended_inverter": recommended_inverter,
        "inverter_undersized": undersized,
        "warnings": warnings,
        "recommendations": recommendations,
        "selected_heavy_duty": heavy_duty_ids,
    }


def calculate_battery_backup(
    total_load_w: float,
    voltage: float,
    capacity_ah: float,
    count: int,
    dod: float
) -> dict:
    """Usable battery energy and estimated backup time.

    Linear model: usable kWh = V x Ah x batteries x depth of discharge / 1000,
    backup hours = usable Wh / running load.
    """
    usable_kwh = voltage * capacity_ah * count * dod / 1000
    backup_hours = round(usable_kwh * 1000 / total_load_w, 1) if total_load_w > 0 else None

    return {
        "usable_kwh": round(usable_kwh, 1),
        "backup_hours": backup_hours,
    }
