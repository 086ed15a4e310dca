"""Contact enquiries sent to an inverter engineer."""
from __future__ import annotations

import re
from typing import Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field, field_validator, model_validator

from constants import CONTACT_EMAIL, CONTACT_SUBJECT, CONTACT_WHATSAPP_NUMBER
from utils import build_load_table

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ContactRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="Customer name.")
    phone: Optional[str] = Field(None, max_length=20, description="Phone number (required for WhatsApp).")
    email: Optional[str] = Field(None, max_length=255, description="Email address (required for email).")
    location: Optional[str] = Field(None, max_length=200, description="Installation location.")
    message: str = Field(..., min_length=1, max_length=1000, description="What the customer needs help with.")
    contact_method: Literal["whatsapp", "email"] = Field(..., description="Preferred way to be reached.")

    @field_validator("name", "phone", "email", "location", "message", mode="before")
    @classmethod
    def _strip(cls, v):
        if isinstance(v, str):
            v = v.strip()
        return v

    @field_validator("phone", "email", "location")
    @classmethod
    def _blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @model_validator(mode="after")
    def _contact_details_for_method(self) -> "ContactRequest":
        if self.contact_method == "whatsapp" and (not self.phone or len(self.phone) < 10):
            raise ValueError("Phone number is required for WhatsApp contact")
        if self.contact_method == "email" and (not self.email or not EMAIL_PATTERN.match(self.email)):
            raise ValueError("Valid email is required for email contact")
        return self


def build_message_body(request: ContactRequest) -> str:
    lines = [f"Name: {request.name}"]
    if request.phone:
        lines.append(f"Phone: {request.phone}")
    if request.email:
        lines.append(f"Email: {request.email}")
    if request.location:
        lines.append(f"Location: {request.location}")
    method = "WhatsApp" if request.contact_method == "whatsapp" else "Email"
    lines.append(f"Preferred Contact: {method}")
    lines.extend(["", "Message:", request.message])
    return "\n".join(lines)


def build_contact_link(request: ContactRequest) -> str:
    """WhatsApp or mailto link with the enquiry pre-filled."""
    body = quote(build_message_body(request))
    if request.contact_method == "whatsapp":
        return f"https://wa.me/{CONTACT_WHATSAPP_NUMBER}?text={body}"
    return f"mailto:{CONTACT_EMAIL}?subject={quote(CONTACT_SUBJECT)}&body={body}"


def build_sizing_snapshot(state, result: dict) -> Optional[dict]:
    """Read-only copy of the sizing attached to an enquiry (None if nothing is selected)."""
    if state.is_empty():
        return None
    return {
        "total_wattage": result["total_load"],
        "recommended_inverter_size": result["recommended_inverter"],
        "appliances": [
            {"name": row["name"], "wattage": row["wattage"], "quantity": row["quantity"]}
            for row in build_load_table(state)
        ],
    }
