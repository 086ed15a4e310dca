from urllib.parse import unquote

import pytest
from pydantic import ValidationError

from contact import ContactRequest, build_contact_link, build_message_body, build_sizing_snapshot
from selection import initial_state, set_quantity, set_variant_quantity
from utils import calculate_load


def _request(**overrides):
    data = {
        "name": "Ada",
        "phone": "08012345678",
        "email": "",
        "location": "Lagos",
        "message": "Need help sizing a backup system.",
        "contact_method": "whatsapp",
    }
    data.update(overrides)
    return ContactRequest(**data)


def test_whitespace_is_stripped_and_blanks_dropped():
    request = _request(name="  Ada  ", location="   ")
    assert request.name == "Ada"
    assert request.location is None
    assert request.email is None


def test_whatsapp_requires_phone():
    with pytest.raises(ValidationError, match="Phone number is required for WhatsApp contact"):
        _request(phone="12345")


def test_email_requires_valid_address():
    with pytest.raises(ValidationError, match="Valid email is required for email contact"):
        _request(contact_method="email", email="not-an-email")
    assert _request(contact_method="email", email="ada@example.com", phone="").phone is None


def test_name_and_message_are_required():
    with pytest.raises(ValidationError):
        _request(name="   ")
    with pytest.raises(ValidationError):
        _request(message="x" * 1001)


def test_message_body():
    body = build_message_body(_request())
    assert body.splitlines() == [
        "Name: Ada",
        "Phone: 08012345678",
        "Location: Lagos",
        "Preferred Contact: WhatsApp",
        "",
        "Message:",
        "Need help sizing a backup system.",
    ]


def test_whatsapp_link():
    link = build_contact_link(_request())
    assert link.startswith("https://wa.me/")
    assert "Name: Ada" in unquote(link)


def test_mailto_link():
    link = build_contact_link(_request(contact_method="email", email="ada@example.com"))
    assert link.startswith("mailto:")
    assert "Preferred Contact: Email" in unquote(link)


def test_sizing_snapshot():
    assert build_sizing_snapshot(initial_state(), calculate_load(initial_state())) is None

    state = set_quantity(initial_state(), "ceiling_fan", 2)
    state = set_variant_quantity(state, "air_conditioner", "ac_1hp", 1)
    snapshot = build_sizing_snapshot(state, calculate_load(state))
    assert snapshot["recommended_inverter_size"] == calculate_load(state)["recommended_inverter"]
    assert snapshot["total_wattage"] == 1050
    assert snapshot["appliances"] == [
        {"name": "Ceiling Fan", "wattage": 75, "quantity": 2},
        {"name": "Air Conditioner 1HP", "wattage": 900, "quantity": 1},
    ]
