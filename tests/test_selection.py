import random

from appliances import APPLIANCES, VARIANTS, can_combine, is_solo_only
from models import SelectionState, VariantSelection
from selection import (
    add_custom_equipment,
    bulk_deactivate,
    bulk_deactivate_non_essentials,
    force_activate,
    initial_state,
    remove_custom_equipment,
    reset,
    set_custom_equipment_quantity,
    set_quantity,
    set_variant_quantity,
)


def test_initial_state_is_empty():
    state = initial_state()
    assert state.is_empty()
    assert state.active_heavy_duty_ids() == []
    assert state == SelectionState()


def test_transitions_do_not_mutate_input():
    state = set_quantity(initial_state(), "ceiling_fan", 2)
    set_quantity(state, "ceiling_fan", 5)
    set_quantity(state, "microwave", 1)
    assert state.quantities == {"ceiling_fan": 2}


def test_light_appliance_quantities():
    state = set_quantity(initial_state(), "ceiling_fan", 3)
    assert state.appliance_quantity("ceiling_fan") == 3
    state = set_quantity(state, "ceiling_fan", -4)
    assert state.appliance_quantity("ceiling_fan") == 0
    assert "ceiling_fan" not in state.quantities


def test_unknown_appliance_is_a_noop():
    state = initial_state()
    assert set_quantity(state, "hovercraft", 2) is state
    assert set_variant_quantity(state, "air_conditioner", "ac_9hp", 1) is state


def test_heavy_duty_quantity_is_on_off():
    state = set_quantity(initial_state(), "washing_machine", 4)
    assert state.appliance_quantity("washing_machine") == 1


def test_solo_selected_then_other_heavy_duty_replaces_it():
    state = set_quantity(initial_state(), "microwave", 1)
    state = set_quantity(state, "washing_machine", 1)
    assert state.active_heavy_duty_ids() == ["washing_machine"]


def test_selecting_solo_clears_heavy_duty():
    state = set_variant_quantity(initial_state(), "air_conditioner", "ac_1hp", 1)
    state = set_variant_quantity(state, "refrigerator", "mini_fridge", 1)
    state = set_quantity(state, "iron", 1)
    assert state.active_heavy_duty_ids() == ["iron"]


def test_incompatible_heavy_duty_replaces_current():
    state = set_quantity(initial_state(), "washing_machine", 1)
    state = set_quantity(state, "toaster", 1)
    assert state.active_heavy_duty_ids() == ["toaster"]


def test_third_heavy_duty_beyond_allowed_pair_replaces_both():
    state = set_variant_quantity(initial_state(), "air_conditioner", "ac_1hp", 1)
    state = set_quantity(state, "refrigerator", 1)
    state = set_quantity(state, "washing_machine", 1)
    assert state.active_heavy_duty_ids() == ["washing_machine"]


def test_solo_active():
    assert not initial_state().has_solo_active()
    assert set_quantity(initial_state(), "microwave", 1).has_solo_active()
    assert set_variant_quantity(initial_state(), "air_conditioner", "ac_2hp", 1).has_solo_active()

    pair = set_variant_quantity(initial_state(), "air_conditioner", "ac_1hp", 1)
    pair = set_variant_quantity(pair, "refrigerator", "mini_fridge", 1)
    assert not pair.has_solo_active()

    forced = force_activate(pair, "iron")
    assert forced.has_solo_active()
    assert len(forced.active_heavy_duty_ids()) == 3


def test_third_heavy_duty_replaces_incompatible_pair():
    state = force_activate(initial_state(), "washing_machine")
    state = force_activate(state, "toaster")
    assert len(state.active_heavy_duty_ids()) == 2

    state = set_variant_quantity(state, "refrigerator", "mini_fridge", 1)
    assert state.active_heavy_duty_ids() == ["mini_fridge"]


def test_compatible_heavy_duty_pair_is_kept():
    state = set_variant_quantity(initial_state(), "air_conditioner", "ac_1hp", 1)
    state = set_quantity(state, "refrigerator", 1)
    assert state.active_heavy_duty_ids() == ["ac_1hp", "mini_fridge"]


def test_single_choice_variant_replaces_previous():
    state = set_variant_quantity(initial_state(), "refrigerator", "mini_fridge", 2)
    state = set_variant_quantity(state, "refrigerator", "top_bottom_freezer", 1)
    assert state.variant_selections["refrigerator"] == (VariantSelection("top_bottom_freezer", 1),)


def test_multi_variant_quantities():
    state = set_variant_quantity(initial_state(), "led_bulb", "led_10w", 4)
    state = set_variant_quantity(state, "led_bulb", "led_20w", 2)
    assert state.active_variant_ids("led_bulb") == ["led_10w", "led_20w"]
    assert state.appliance_quantity("led_bulb") == 1

    state = set_variant_quantity(state, "led_bulb", "led_10w", 0)
    assert state.active_variant_ids("led_bulb") == ["led_20w"]
    state = set_variant_quantity(state, "led_bulb", "led_20w", 0)
    assert state.appliance_quantity("led_bulb") == 0
    assert "led_bulb" not in state.variant_selections


def test_parent_quantity_switches_default_variant():
    state = set_quantity(initial_state(), "led_tv", 1)
    assert state.active_variant_ids("led_tv") == ["tv_24"]
    state = set_quantity(state, "led_tv", 0)
    assert state.appliance_quantity("led_tv") == 0


def test_force_activate_bypasses_rules():
    state = set_quantity(initial_state(), "microwave", 1)
    state = force_activate(state, "electric_kettle")
    assert state.active_heavy_duty_ids() == ["microwave", "electric_kettle"]


def test_force_activate_chosen_size():
    state = set_quantity(initial_state(), "microwave", 1)
    state = force_activate(state, "deep_freezer")
    assert state.active_heavy_duty_ids() == ["microwave", "deep_freezer"]


def test_force_activate_variant_keeps_single_choice():
    state = set_variant_quantity(initial_state(), "air_conditioner", "ac_1hp", 1)
    state = force_activate(state, "ac_2hp")
    assert state.active_variant_ids("air_conditioner") == ["ac_2hp"]


def test_bulk_deactivate_non_essentials():
    state = initial_state()
    state = set_quantity(state, "ceiling_fan", 2)
    state = set_quantity(state, "gaming_console", 1)
    state = set_variant_quantity(state, "led_tv", "tv_43", 1)
    state = set_variant_quantity(state, "led_bulb", "led_10w", 5)
    state = set_quantity(state, "washing_machine", 1)

    state = bulk_deactivate_non_essentials(state)
    assert state.quantities == {"ceiling_fan": 2, "washing_machine": 1}
    assert list(state.variant_selections) == ["led_bulb"]


def test_bulk_deactivate_fans():
    state = set_quantity(initial_state(), "ceiling_fan", 2)
    state = set_quantity(state, "standing_fan", 1)
    state = set_quantity(state, "laptop", 1)
    state = bulk_deactivate(state, ["ceiling_fan", "standing_fan"])
    assert not state.has_fans_selected()
    assert state.appliance_quantity("laptop") == 1


def test_custom_equipment_lifecycle():
    state = add_custom_equipment(initial_state(), "  Borehole controller ", 250, 2, equipment_id="custom_a")
    assert state.custom_equipment[0].name == "Borehole controller"
    assert state.active_count() == 1

    state = set_custom_equipment_quantity(state, "custom_a", 3)
    assert state.custom_equipment[0].quantity == 3

    assert remove_custom_equipment(state, "custom_a").custom_equipment == ()
    assert set_custom_equipment_quantity(state, "custom_a", 0).custom_equipment == ()


def test_custom_equipment_ignores_invalid_input():
    state = initial_state()
    assert add_custom_equipment(state, "   ", 100) is state
    assert add_custom_equipment(state, "Pump", 0) is state
    assert add_custom_equipment(state, "Pump", 100, 0) is state


def test_custom_equipment_gets_generated_id():
    state = add_custom_equipment(initial_state(), "Pump", 100)
    assert state.custom_equipment[0].id.startswith("custom_")


def test_reset_clears_everything():
    state = set_quantity(initial_state(), "ceiling_fan", 2)
    state = set_variant_quantity(state, "air_conditioner", "ac_15hp", 1)
    state = force_activate(state, "microwave")
    state = add_custom_equipment(state, "Pump", 100)
    assert reset(state) == initial_state()


def _random_step(rng, state):
    appliance_id = rng.choice(list(APPLIANCES))
    if appliance_id in VARIANTS and rng.random() < 0.7:
        variant_id = rng.choice(list(VARIANTS[appliance_id]))
        return set_variant_quantity(state, appliance_id, variant_id, rng.randint(0, 3))
    return set_quantity(state, appliance_id, rng.randint(0, 3))


def test_heavy_duty_limits_hold_on_default_path():
    rng = random.Random(1234)
    state = initial_state()
    for _ in range(2000):
        state = _random_step(rng, state)
        active = state.active_heavy_duty_ids()
        assert len(active) <= 2
        if any(is_solo_only(item_id) for item_id in active):
            assert len(active) == 1
        if len(active) == 2:
            assert can_combine(*active)


def test_solo_activation_leaves_only_that_item():
    rng = random.Random(99)
    state = initial_state()
    for _ in range(200):
        state = _random_step(rng, state)
        state = set_quantity(state, "vacuum", 1)
        assert state.active_heavy_duty_ids() == ["vacuum"]
        state = set_quantity(state, "vacuum", 0)
