from datetime import datetime

from report import generate_load_report_pdf, report_filename
from selection import add_custom_equipment, initial_state, set_quantity, set_variant_quantity


def test_report_for_typical_home():
    state = set_variant_quantity(initial_state(), "led_bulb", "led_15w", 6)
    state = set_quantity(state, "ceiling_fan", 2)
    state = set_variant_quantity(state, "air_conditioner", "ac_1hp_inv", 1)
    state = add_custom_equipment(state, "Gate <motor> & lights", 300)

    pdf = generate_load_report_pdf(state, battery={"count": 4}, company_name="Acme & Sons", report_ref="R-1")
    assert pdf.startswith(b"%PDF")


def test_report_for_empty_selection():
    assert generate_load_report_pdf(initial_state()).startswith(b"%PDF")


def test_report_filename():
    assert report_filename(datetime(2024, 3, 5, 9, 7)) == "inverter_load_report_20240305_0907.pdf"
