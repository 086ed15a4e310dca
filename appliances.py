"""Appliance catalog and variant registry.

Static reference data for the load calculator: appliances, their size
variants, categories, and the heavy-duty compatibility tables.
"""

# Appliance categories, in display order
CATEGORIES = {
    "lighting": {"name": "Lighting", "icon": "💡"},
    "entertainment": {"name": "Entertainment", "icon": "📺"},
    "kitchen": {"name": "Kitchen", "icon": "🍽️"},
    "cooling": {"name": "Cooling", "icon": "🌀"},
    "office": {"name": "Office & Work", "icon": "🖥️"},
    "heavy-duty": {"name": "Heavy Duty Appliances", "icon": "⚡"},
}

# Appliances (wattage = running watts, surge = startup multiplier)
APPLIANCES = {
    # Lighting
    "led_bulb": {
        "name": "LED Bulb", "wattage": 10, "surge": 1, "category": "lighting",
        "heavy_duty": False, "solo_only": False, "has_variants": True, "allow_multiple": True,
    },
    "fluorescent": {
        "name": "Fluorescent Tube", "wattage": 40, "surge": 1.2, "category": "lighting",
        "heavy_duty": False, "solo_only": False,
    },
    "outdoor_light": {
        "name": "Outdoor Light", "wattage": 60, "surge": 1, "category": "lighting",
        "heavy_duty": False, "solo_only": False,
    },
    # Entertainment
    "led_tv": {
        "name": "LED TV", "wattage": 50, "surge": 1, "category": "entertainment",
        "heavy_duty": False, "solo_only": False, "has_variants": True, "allow_multiple": True,
    },
    "sound_system": {
        "name": "Sound System", "wattage": 100, "surge": 1.5, "category": "entertainment",
        "heavy_duty": False, "solo_only": False,
    },
    "gaming_console": {
        "name": "Gaming Console", "wattage": 200, "surge": 1, "category": "entertainment",
        "heavy_duty": False, "solo_only": False,
    },
    "decoder": {
        "name": "Cable/Satellite Decoder", "wattage": 25, "surge": 1, "category": "entertainment",
        "heavy_duty": False, "solo_only": False,
    },
    # Kitchen (under 500W)
    "blender": {
        "name": "Blender", "wattage": 400, "surge": 3, "category": "kitchen",
        "heavy_duty": False, "solo_only": False,
    },
    # Cooling (under 500W)
    "ceiling_fan": {
        "name": "Ceiling Fan", "wattage": 75, "surge": 1.5, "category": "cooling",
        "heavy_duty": False, "solo_only": False,
    },
    "standing_fan": {
        "name": "Standing Fan", "wattage": 55, "surge": 1.5, "category": "cooling",
        "heavy_duty": False, "solo_only": False,
    },
    # Office
    "laptop": {
        "name": "Laptop", "wattage": 65, "surge": 1, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    "desktop": {
        "name": "Desktop Computer", "wattage": 250, "surge": 1.5, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    "monitor": {
        "name": "Computer Monitor", "wattage": 40, "surge": 1, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    "printer": {
        "name": "Printer", "wattage": 150, "surge": 2, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    "router": {
        "name": "WiFi Router", "wattage": 15, "surge": 1, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    "phone_charger": {
        "name": "Phone Charger", "wattage": 10, "surge": 1, "category": "office",
        "heavy_duty": False, "solo_only": False,
    },
    # Heavy duty
    "air_conditioner": {
        "name": "Air Conditioner", "wattage": 900, "surge": 3, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": False, "has_variants": True, "allow_multiple": False,
    },
    "refrigerator": {
        "name": "Refrigerator", "wattage": 350, "surge": 3, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": False, "has_variants": True, "allow_multiple": False,
    },
    "microwave": {
        "name": "Microwave Oven", "wattage": 1200, "surge": 2, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
    "electric_kettle": {
        "name": "Electric Kettle", "wattage": 1500, "surge": 1, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
    "washing_machine": {
        "name": "Washing Machine", "wattage": 700, "surge": 3, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": False,
    },
    "iron": {
        "name": "Electric Iron", "wattage": 1200, "surge": 1, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
    "water_pump": {
        "name": "Water Pump (1HP)", "wattage": 750, "surge": 3, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
    "space_heater": {
        "name": "Space Heater", "wattage": 1500, "surge": 1, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
    "toaster": {
        "name": "Toaster", "wattage": 800, "surge": 1, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": False,
    },
    "vacuum": {
        "name": "Vacuum Cleaner", "wattage": 1000, "surge": 2, "category": "heavy-duty",
        "heavy_duty": True, "solo_only": True,
    },
}

# Size variants, keyed by parent appliance. The first entry is the default.
VARIANTS = {
    "led_bulb": {
        "led_10w": {"label": "10W", "wattage": 10, "surge": 1},
        "led_15w": {"label": "15W", "wattage": 15, "surge": 1},
        "led_20w": {"label": "20W", "wattage": 20, "surge": 1},
        "led_30w": {"label": "30W", "wattage": 30, "surge": 1},
        "led_40w": {"label": "40W", "wattage": 40, "surge": 1},
    },
    "led_tv": {
        "tv_24": {"label": '24"', "wattage": 30, "surge": 1},
        "tv_32": {"label": '32"', "wattage": 50, "surge": 1},
        "tv_43": {"label": '43"', "wattage": 80, "surge": 1},
        "tv_50": {"label": '50"', "wattage": 100, "surge": 1},
        "tv_55": {"label": '55"', "wattage": 120, "surge": 1},
        "tv_65": {"label": '65"', "wattage": 150, "surge": 1},
        "tv_75": {"label": '75"', "wattage": 200, "surge": 1},
    },
    "refrigerator": {
        "mini_fridge": {"label": "Mini Fridge", "wattage": 100, "surge": 3},
        "top_bottom_freezer": {"label": "Top/Bottom Freezer", "wattage": 350, "surge": 3},
        "deep_freezer": {"label": "Deep Freezer", "wattage": 600, "surge": 3},
    },
    "air_conditioner": {
        "ac_1hp": {"label": "1HP", "wattage": 900, "surge": 3},
        "ac_15hp": {"label": "1.5HP", "wattage": 1200, "surge": 3},
        "ac_2hp": {"label": "2HP", "wattage": 1800, "surge": 3},
        "ac_1hp_inv": {"label": "1HP (Inverter)", "wattage": 700, "surge": 2},
        "ac_15hp_inv": {"label": "1.5HP (Inverter)", "wattage": 950, "surge": 2},
        "ac_2hp_inv": {"label": "2HP (Inverter)", "wattage": 1400, "surge": 2},
    },
}

# Variants that must run alone even though their parent is not solo-only
SOLO_ONLY_VARIANTS = {"ac_2hp", "ac_2hp_inv"}

# Heavy-duty pairs that may run together (order-insensitive). Variant ids
# only: appliances with sizes are always judged by the chosen size.
ALLOWED_COMBINATIONS = [
    ("ac_1hp", "mini_fridge"),
    ("ac_1hp", "top_bottom_freezer"),
    ("ac_1hp", "deep_freezer"),
    ("ac_1hp_inv", "mini_fridge"),
    ("ac_1hp_inv", "top_bottom_freezer"),
    ("ac_1hp_inv", "deep_freezer"),
    ("ac_15hp", "mini_fridge"),
    ("ac_15hp_inv", "mini_fridge"),
    ("mini_fridge", "toaster"),
    ("washing_machine", "mini_fridge"),
]

# Combinations that should produce a warning. Single-id entries fire when that
# appliance runs alongside any other heavy-duty item.
AVOID_COMBINATIONS = [
    {"ids": ["ac_1hp", "water_pump"], "warning": "Avoid running AC and Water Pump together - high surge load."},
    {"ids": ["ac_15hp", "water_pump"], "warning": "Avoid running AC and Water Pump together - high surge load."},
    {"ids": ["ac_2hp", "water_pump"], "warning": "Avoid running AC and Water Pump together - high surge load."},
    {"ids": ["electric_kettle"], "warning": "Electric Kettle should not run with other heavy-duty appliances."},
    {"ids": ["space_heater"], "warning": "Space Heater should not run with other heavy-duty appliances."},
    {"ids": ["iron"], "warning": "Electric Iron should not run with other heavy-duty appliances."},
    {"ids": ["microwave"], "warning": "Microwave Oven should not run with other heavy-duty appliances."},
    {"ids": ["vacuum"], "warning": "Vacuum Cleaner should not run with other heavy-duty appliances."},
    {"ids": ["washing_machine", "water_pump"], "warning": "Avoid running Washing Machine and Water Pump together."},
]

# Kept on when the user turns off non-essential loads
ESSENTIAL_APPLIANCE_IDS = {"led_bulb", "phone_charger", "ceiling_fan", "standing_fan", "laptop", "router"}

# Fans, offered for switch-off when an AC is selected
FAN_APPLIANCE_IDS = {"ceiling_fan", "standing_fan"}

# Families used by the load warnings
AC_APPLIANCE_IDS = {"air_conditioner"}
REFRIGERATION_APPLIANCE_IDS = {"refrigerator"}
HEATING_APPLIANCE_IDS = {"microwave", "toaster"}


def get_appliance(appliance_id):
    """Return the catalog entry for an appliance, or None."""
    return APPLIANCES.get(appliance_id)


def get_variants(appliance_id):
    """Return the variants of an appliance as {variant_id: data} (empty if none)."""
    return VARIANTS.get(appliance_id, {})


def get_variant(variant_id):
    """Return a variant entry with its parent_id filled in, or None."""
    for parent_id, variants in VARIANTS.items():
        if variant_id in variants:
            return {"id": variant_id, "parent_id": parent_id, **variants[variant_id]}
    return None


def get_parent_id(variant_id):
    variant = get_variant(variant_id)
    return variant["parent_id"] if variant else None


def default_variant_id(appliance_id):
    """First listed variant of an appliance, used when it is switched on directly."""
    variants = get_variants(appliance_id)
    return next(iter(variants), None)


def has_variants(appliance_id):
    appliance = APPLIANCES.get(appliance_id)
    return bool(appliance and appliance.get("has_variants") and appliance_id in VARIANTS)


def allows_multiple(appliance_id):
    appliance = APPLIANCES.get(appliance_id)
    return bool(appliance) and appliance.get("allow_multiple", True)


def is_heavy_duty(item_id):
    """Heavy-duty check for an appliance id or a variant id.

    Variants inherit the flag from their parent appliance.
    """
    if item_id in APPLIANCES:
        return APPLIANCES[item_id]["heavy_duty"]
    parent_id = get_parent_id(item_id)
    if parent_id:
        return APPLIANCES[parent_id]["heavy_duty"]
    return False


def is_solo_only(item_id):
    """Solo-only check for an appliance id or a variant id."""
    if not is_heavy_duty(item_id):
        return False
    if item_id in APPLIANCES:
        return APPLIANCES[item_id].get("solo_only", False)
    if item_id in SOLO_ONLY_VARIANTS:
        return True
    return APPLIANCES[get_parent_id(item_id)].get("solo_only", False)


def get_display_name(item_id):
    """Human-readable name, e.g. "Air Conditioner 1.5HP" for a variant."""
    if item_id in APPLIANCES:
        return APPLIANCES[item_id]["name"]
    variant = get_variant(item_id)
    if variant:
        return f"{APPLIANCES[variant['parent_id']]['name']} {variant['label']}".strip()
    return None


def get_appliances_by_category(category_id):
    """Appliance ids in a category, in catalog order."""
    return [
        appliance_id for appliance_id, data in APPLIANCES.items()
        if data["category"] == category_id
    ]


def can_combine(id1, id2):
    """Check if two heavy-duty items are an allowed pair."""
    return (id1, id2) in ALLOWED_COMBINATIONS or (id2, id1) in ALLOWED_COMBINATIONS


def get_combination_warnings(selected_ids):
    """Warnings from the avoid-combination table for the active heavy-duty ids."""
    selected = set(selected_ids)
    warnings = []

    for combo in AVOID_COMBINATIONS:
        ids = combo["ids"]
        if len(ids) > 1 and all(item_id in selected for item_id in ids):
            warnings.append(combo["warning"])
        # Single-id entries: solo appliance running with other heavy-duty load
        if len(ids) == 1 and ids[0] in selected and len(selected) > 1:
            warnings.append(combo["warning"])

    return warnings
