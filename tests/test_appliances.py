from appliances import (
    ALLOWED_COMBINATIONS,
    APPLIANCES,
    CATEGORIES,
    VARIANTS,
    allows_multiple,
    can_combine,
    default_variant_id,
    get_appliances_by_category,
    get_combination_warnings,
    get_display_name,
    get_parent_id,
    get_variant,
    has_variants,
    is_heavy_duty,
    is_solo_only,
)


def test_every_appliance_has_a_known_category():
    for appliance in APPLIANCES.values():
        assert appliance["category"] in CATEGORIES


def test_variant_parents_are_flagged():
    for parent_id in VARIANTS:
        assert has_variants(parent_id)
    assert not has_variants("microwave")
    assert not has_variants("no_such_appliance")


def test_variant_lookup_fills_in_parent():
    variant = get_variant("ac_15hp")
    assert variant["parent_id"] == "air_conditioner"
    assert variant["wattage"] == 1200
    assert get_parent_id("tv_43") == "led_tv"
    assert get_variant("nope") is None


def test_default_variant_is_first_listed():
    assert default_variant_id("air_conditioner") == "ac_1hp"
    assert default_variant_id("refrigerator") == "mini_fridge"
    assert default_variant_id("microwave") is None


def test_single_choice_appliances():
    assert not allows_multiple("air_conditioner")
    assert not allows_multiple("refrigerator")
    assert allows_multiple("led_bulb")


def test_variants_inherit_heavy_duty_flag():
    assert is_heavy_duty("ac_1hp")
    assert is_heavy_duty("deep_freezer")
    assert not is_heavy_duty("led_15w")
    assert not is_heavy_duty("ceiling_fan")
    assert not is_heavy_duty("unknown")


def test_solo_only_variants():
    assert is_solo_only("ac_2hp")
    assert is_solo_only("ac_2hp_inv")
    assert not is_solo_only("ac_1hp")
    assert is_solo_only("microwave")
    assert not is_solo_only("toaster")


def test_display_names():
    assert get_display_name("microwave") == "Microwave Oven"
    assert get_display_name("ac_15hp") == "Air Conditioner 1.5HP"
    assert get_display_name("unknown") is None


def test_can_combine_is_order_insensitive():
    assert can_combine("ac_1hp", "mini_fridge")
    assert can_combine("mini_fridge", "ac_1hp")
    assert not can_combine("ac_2hp", "mini_fridge")


def test_appliances_by_category_keeps_catalog_order():
    assert get_appliances_by_category("cooling") == ["ceiling_fan", "standing_fan"]


def test_combination_warnings():
    assert get_combination_warnings(["ac_1hp", "water_pump"]) == [
        "Avoid running AC and Water Pump together - high surge load."
    ]
    # A solo appliance on its own is fine
    assert get_combination_warnings(["microwave"]) == []
    assert get_combination_warnings(["microwave", "mini_fridge"]) == [
        "Microwave Oven should not run with other heavy-duty appliances."
    ]


def test_allowed_pairs_use_selectable_ids():
    for pair in ALLOWED_COMBINATIONS:
        for item_id in pair:
            assert is_heavy_duty(item_id)
            assert not has_variants(item_id)
