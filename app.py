"""Inverter Load Calculator Streamlit app.

Pick the appliances you want to run during a power cut and get a
recommended inverter size, surge allowance and battery backup estimate.
"""

import logging

import streamlit as st
import pandas as pd
import plotly.express as px
from pydantic import ValidationError

from appliances import (
    APPLIANCES,
    CATEGORIES,
    ESSENTIAL_APPLIANCE_IDS,
    FAN_APPLIANCE_IDS,
    get_appliances_by_category,
    get_display_name,
    get_variants,
    has_variants,
    allows_multiple,
    is_heavy_duty,
)
from compatibility import can_activate
from constants import (
    BATTERY_CAPACITIES_AH,
    BATTERY_COUNT_RANGE,
    BATTERY_VOLTAGES,
    COMPANY_NAME,
    DEFAULT_BATTERY,
    INVERTER_SIZES,
    POWER_FACTOR,
    SAFETY_MARGIN,
    SURGE_DIVERSITY,
)
from contact import ContactRequest, build_contact_link, build_sizing_snapshot
from report import generate_load_report_pdf, report_filename
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
from utils import build_load_table, calculate_battery_backup, calculate_load

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

st.set_page_config(
    page_title="Inverter Load Calculator",
    page_icon="⚡",
    layout="wide"
)

PROMPTS = {
    "heavy-duty-first": {
        "text": "It is recommended to switch off other household appliances when using heavy-duty device.",
        "confirm": "Turn OFF",
        "cancel": "Leave ON",
    },
    "ac-fan-conflict": {
        "text": "We noticed you have fans already selected. Do you wish to switch them OFF while selecting the AC?",
        "confirm": "Turn OFF Fan",
        "cancel": "Leave ON",
    },
}

if "selection" not in st.session_state:
    st.session_state.selection = initial_state()
    st.session_state.revision = 0
    st.session_state.pending_force = None
    st.session_state.pending_prompt = None


# --- Intent callbacks ---

def _has_non_essentials(state):
    return any(
        state.appliance_quantity(appliance_id) > 0
        for appliance_id in APPLIANCES
        if appliance_id not in ESSENTIAL_APPLIANCE_IDS and not is_heavy_duty(appliance_id)
    )


def _has_ac(state):
    return state.appliance_quantity("air_conditioner") > 0


def _apply(operation, *args):
    """Run a selection intent and store the new state."""
    before = st.session_state.selection
    after = operation(before, *args)
    st.session_state.selection = after
    st.session_state.revision += 1

    # Energy-efficiency prompts
    if _has_ac(after) and not _has_ac(before) and after.has_fans_selected():
        st.session_state.pending_prompt = "ac-fan-conflict"
    elif after.has_heavy_duty_selected() and not before.has_heavy_duty_selected() and _has_non_essentials(after):
        st.session_state.pending_prompt = "heavy-duty-first"


def _apply_widget_variant(appliance_id, widget_key):
    chosen = st.session_state[widget_key]
    if chosen is None:
        _apply(set_quantity, appliance_id, 0)
    else:
        _apply(set_variant_quantity, appliance_id, chosen, 1)


def _request_force(item_id):
    st.session_state.pending_force = item_id


def _confirm_force():
    _apply(force_activate, st.session_state.pending_force)
    st.session_state.pending_force = None


def _cancel_force():
    st.session_state.pending_force = None


def _confirm_prompt():
    if st.session_state.pending_prompt == "ac-fan-conflict":
        _apply(bulk_deactivate, FAN_APPLIANCE_IDS)
    else:
        _apply(bulk_deactivate_non_essentials)
    st.session_state.pending_prompt = None


def _dismiss_prompt():
    st.session_state.pending_prompt = None


def _reset():
    _apply(reset)
    st.session_state.pending_force = None
    st.session_state.pending_prompt = None


# --- Rendering helpers ---

def _badges(appliance):
    badges = ""
    if appliance["heavy_duty"]:
        badges += " :red[HEAVY]"
        if appliance.get("solo_only"):
            badges += " :orange[SOLO]"
    return badges


def _stepper(key, quantity, on_change_args):
    """−/qty/+ controls; on_change_args builds the callback args for a new quantity."""
    col_dec, col_qty, col_inc = st.columns(3)
    with col_dec:
        st.button("−", key=f"dec_{key}", on_click=_apply, args=on_change_args(quantity - 1),
                  disabled=quantity == 0, use_container_width=True)
    with col_qty:
        st.markdown(f"<div style='text-align:center;padding-top:6px'><b>{quantity}</b></div>",
                    unsafe_allow_html=True)
    with col_inc:
        st.button("+", key=f"inc_{key}", on_click=_apply, args=on_change_args(quantity + 1),
                  use_container_width=True)


def render_appliance(appliance_id, state):
    appliance = APPLIANCES[appliance_id]
    quantity = state.appliance_quantity(appliance_id)
    admission = can_activate(appliance_id, state)

    col_name, col_ctrl = st.columns([3, 2])
    with col_name:
        st.markdown(f"**{appliance['name']}** · {appliance['wattage']} W{_badges(appliance)}")
        if not admission.allowed:
            st.caption(f"🚫 {admission.reason}")

    with col_ctrl:
        if has_variants(appliance_id):
            render_variants(appliance_id, state, admission)
        elif not appliance["heavy_duty"]:
            _stepper(appliance_id, quantity, lambda q: (set_quantity, appliance_id, q))
        elif quantity > 0:
            st.button("Remove", key=f"off_{appliance_id}", on_click=_apply,
                      args=(set_quantity, appliance_id, 0), use_container_width=True)
        elif admission.allowed:
            st.button("Select", key=f"on_{appliance_id}", on_click=_apply,
                      args=(set_quantity, appliance_id, 1), use_container_width=True)
        else:
            st.button("Use anyway…", key=f"force_{appliance_id}", on_click=_request_force,
                      args=(appliance_id,), use_container_width=True)


def render_variants(appliance_id, state, admission):
    variants = get_variants(appliance_id)

    if not allows_multiple(appliance_id):
        active = state.active_variant_ids(appliance_id)
        options = [None, *variants]
        widget_key = f"variant_{appliance_id}_{st.session_state.revision}"
        st.selectbox(
            "Size",
            options,
            index=options.index(active[0]) if active else 0,
            format_func=lambda v: "None" if v is None else f"{variants[v]['label']} ({variants[v]['wattage']} W)",
            key=widget_key,
            on_change=_apply_widget_variant,
            args=(appliance_id, widget_key),
            label_visibility="collapsed",
        )
        if not admission.allowed and not active:
            with st.popover("Use anyway…", use_container_width=True):
                for variant_id, variant in variants.items():
                    st.button(variant["label"], key=f"force_{variant_id}", on_click=_request_force,
                              args=(variant_id,), use_container_width=True)
        return

    with st.popover("Sizes"):
        for variant_id, variant in variants.items():
            st.caption(f"{variant['label']} · {variant['wattage']} W")
            _stepper(
                variant_id,
                state.variant_quantity(appliance_id, variant_id),
                lambda q, v=variant_id: (set_variant_quantity, appliance_id, v, q),
            )


def render_custom_equipment(state):
    with st.form("custom_equipment", clear_on_submit=True):
        col_name, col_watts, col_qty = st.columns([3, 2, 1])
        with col_name:
            name = st.text_input("Equipment name")
        with col_watts:
            wattage = st.number_input("Wattage (W)", min_value=0, value=0, step=10)
        with col_qty:
            qty = st.number_input("Qty", min_value=1, value=1, step=1)
        if st.form_submit_button("Add equipment"):
            if not name.strip() or wattage <= 0:
                st.warning("Enter a name and a wattage above 0 W.")
            else:
                _apply(add_custom_equipment, name, wattage, qty)

    for eq in state.custom_equipment:
        col_name, col_ctrl, col_remove = st.columns([3, 2, 1])
        with col_name:
            st.markdown(f"**{eq.name}** · {eq.wattage} W :violet[CUSTOM]")
        with col_ctrl:
            _stepper(eq.id, eq.quantity, lambda q, i=eq.id: (set_custom_equipment_quantity, i, q))
        with col_remove:
            st.button("✕", key=f"remove_{eq.id}", on_click=_apply, args=(remove_custom_equipment, eq.id))


# --- Sidebar: battery bank ---

with st.sidebar:
    st.header("🔋 Battery Configuration")
    battery = {
        "voltage": st.selectbox("Bank voltage (V)", BATTERY_VOLTAGES,
                                index=BATTERY_VOLTAGES.index(DEFAULT_BATTERY["voltage"])),
        "capacity_ah": st.selectbox("Capacity (Ah)", BATTERY_CAPACITIES_AH,
                                    index=BATTERY_CAPACITIES_AH.index(DEFAULT_BATTERY["capacity_ah"])),
        "count": st.slider("Number of batteries", *BATTERY_COUNT_RANGE, value=DEFAULT_BATTERY["count"]),
        "dod": st.slider("Depth of discharge (%)", 50, 100, int(DEFAULT_BATTERY["dod"] * 100), step=5) / 100,
    }

state = st.session_state.selection
result = calculate_load(state)
backup = calculate_battery_backup(
    result["total_load"],
    voltage=battery["voltage"],
    capacity_ah=battery["capacity_ah"],
    count=battery["count"],
    dod=battery["dod"],
)

with st.sidebar:
    st.metric("Usable energy", f"{backup['usable_kwh']:.1f} kWh")
    st.markdown("---")
    st.markdown("""
    **Important Tips**
    1. Use only energy-saving appliances to get the best result.
    2. Avoid running multiple heavy-duty devices at the same time.
    """)

st.title("⚡ Inverter Load Calculator")

tab_calculator, tab_report, tab_contact, tab_assumptions = st.tabs(
    ["Calculator", "Download Report", "Contact an Engineer", "Assumptions"]
)

with tab_calculator:

    # Pending confirmations
    if st.session_state.pending_force:
        item_id = st.session_state.pending_force
        others = ", ".join(state.heavy_duty_names()) or "your current selection"
        st.warning(
            f"Using **{get_display_name(item_id)}** alongside {others} will require a very large "
            "inverter size. Do you wish to proceed?"
        )
        col_yes, col_no, _ = st.columns([1, 1, 4])
        col_yes.button("Use it", on_click=_confirm_force, type="primary")
        col_no.button("Don't use it", on_click=_cancel_force)

    prompt = PROMPTS.get(st.session_state.pending_prompt)
    if prompt:
        st.info(f"**Energy Efficiency**: {prompt['text']}")
        col_yes, col_no, _ = st.columns([1, 1, 4])
        col_yes.button(prompt["confirm"], on_click=_confirm_prompt, type="primary")
        col_no.button(prompt["cancel"], on_click=_dismiss_prompt)

    col_select, col_results = st.columns([3, 2])

    with col_select:
        st.subheader("Select Your Appliances")
        active_count = state.active_count()
        if active_count:
            st.caption(f"{active_count} appliance{'s' if active_count != 1 else ''} selected")

        for category_id, category in CATEGORIES.items():
            appliance_ids = get_appliances_by_category(category_id)
            selected = sum(1 for a in appliance_ids if state.appliance_quantity(a) > 0)
            label = f"{category['icon']} {category['name']}" + (f" ({selected} selected)" if selected else "")
            with st.expander(label, expanded=category_id == "heavy-duty"):
                if category_id == "heavy-duty":
                    st.caption("Selection rules: **Solo** appliances must be used alone. "
                               "Other heavy-duty: max 2 compatible appliances.")
                    if state.has_solo_active():
                        st.info("A solo appliance is running. Other heavy-duty appliances are disabled until it is removed.")
                for appliance_id in appliance_ids:
                    render_appliance(appliance_id, state)

        with st.expander("🛠️ Custom Equipment", expanded=bool(state.custom_equipment)):
            render_custom_equipment(state)

    with col_results:
        st.subheader("Calculation Results")

        col1, col2 = st.columns(2)
        with col1:
            st.metric("Total Load", f"{result['total_load']:,} W")
            st.metric("Required", f"{result['required_kva']} kVA")
        with col2:
            st.metric("Peak Surge", f"{result['peak_surge']:,} W",
                      help=f"Worst single motor startup. {SURGE_DIVERSITY:.0%} of it "
                           f"({result['adjusted_surge']:,} W) is added to the running load.")
            st.metric("Recommended", f"{result['recommended_inverter']} kVA")

        if backup["backup_hours"] is not None:
            st.metric("Estimated Backup", f"{backup['backup_hours']} hours")

        if result["inverter_undersized"]:
            st.error("This load exceeds the largest standard inverter size.")

        if result["warnings"]:
            st.warning("**Warnings**\n\n" + "\n".join(f"- {w}" for w in result["warnings"]))

        if result["recommendations"]:
            st.success("**Recommendations**\n\n" + "\n".join(f"- {r}" for r in result["recommendations"]))

        rows = build_load_table(state)
        if rows:
            df = pd.DataFrame(rows)
            fig = px.bar(
                df, x="name", y="total_watts", color="category_name",
                labels={"name": "", "total_watts": "Running load (W)", "category_name": "Category"},
                title="Load Breakdown",
            )
            fig.update_layout(height=320, margin=dict(t=40, b=0), showlegend=False)
            st.plotly_chart(fig, use_container_width=True)

            st.dataframe(
                df[["name", "wattage", "quantity", "total_watts"]].rename(columns={
                    "name": "Appliance", "wattage": "Wattage (W)", "quantity": "Qty", "total_watts": "Total (W)",
                }),
                hide_index=True,
                use_container_width=True,
            )

        col_a, col_b = st.columns(2)
        col_a.button("Turn off non-essentials", on_click=_apply, args=(bulk_deactivate_non_essentials,),
                     disabled=state.is_empty(), use_container_width=True)
        col_b.button("Turn off fans", on_click=_apply, args=(bulk_deactivate, FAN_APPLIANCE_IDS),
                     disabled=not state.has_fans_selected(), use_container_width=True)
        st.button("Reset", on_click=_reset, disabled=state.is_empty(), use_container_width=True)

        st.info(
            "If you plan to run very heavy equipment, or devices not listed in this calculator, "
            "please consult a qualified inverter engineer."
        )

with tab_report:
    st.header("Inverter Load Report")

    if state.is_empty():
        st.warning("Select at least one appliance in the Calculator tab to generate a report.")
    else:
        company_name = st.text_input("Company / installer name", value=COMPANY_NAME)
        report_ref = st.text_input("Report reference (optional)", value="")

        if st.button("Generate PDF Report", type="primary"):
            with st.spinner("Generating report..."):
                pdf_bytes = generate_load_report_pdf(
                    state,
                    battery=battery,
                    company_name=company_name,
                    report_ref=report_ref or None,
                )
            st.download_button(
                label="Download PDF",
                data=pdf_bytes,
                file_name=report_filename(),
                mime="application/pdf",
            )

with tab_contact:
    st.header("Contact an Engineer")
    st.markdown("Get expert guidance, avoid costly mistakes, and install the right system the first time.")

    with st.form("contact"):
        name = st.text_input("Name *")
        col_phone, col_email = st.columns(2)
        with col_phone:
            phone = st.text_input("Phone")
        with col_email:
            email = st.text_input("Email")
        location = st.text_input("Location")
        message = st.text_area("Message *")
        contact_method = st.radio(
            "How would you like to be reached?",
            ["whatsapp", "email"],
            format_func=lambda m: "WhatsApp" if m == "whatsapp" else "Email",
            horizontal=True,
        )
        submitted = st.form_submit_button("Prepare message")

    if submitted:
        try:
            request = ContactRequest(
                name=name, phone=phone, email=email, location=location,
                message=message, contact_method=contact_method,
            )
        except ValidationError as e:
            for error in e.errors():
                st.error(error["msg"].removeprefix("Value error, "))
        else:
            label = "Open WhatsApp" if request.contact_method == "whatsapp" else "Open email"
            st.success("Your message has been prepared.")
            st.link_button(label, build_contact_link(request), type="primary")

            snapshot = build_sizing_snapshot(state, result)
            with st.expander("Sizing details shared with the engineer"):
                if snapshot:
                    st.json(snapshot)
                else:
                    st.write("No appliances selected.")

with tab_assumptions:
    st.header("How the Calculation Works")
    st.markdown(f"""
    | Step | Rule |
    |------|------|
    | **Total load** | Sum of running watts × quantity for every selected appliance and custom item |
    | **Peak surge** | Largest single startup surge: wattage × (surge multiplier − 1) × quantity |
    | **Surge allowance** | {SURGE_DIVERSITY:.0%} of the peak surge (motors rarely start at the same moment) |
    | **Required power** | (total load + surge allowance) × {SAFETY_MARGIN} safety margin |
    | **Required kVA** | required power ÷ (1000 × {POWER_FACTOR} power factor) |
    | **Recommended inverter** | Smallest of {", ".join(str(s) for s in INVERTER_SIZES)} kVA that covers the requirement |
    """)

    st.subheader("Heavy-Duty Rules")
    st.markdown("""
    - **Solo** appliances (microwave, kettle, iron, water pump, space heater, vacuum, 2HP AC) must run alone.
    - At most **two** other heavy-duty appliances may run together, and only in approved pairs
      (e.g. a 1HP AC with a refrigerator).
    - Choosing a conflicting appliance replaces the current heavy-duty selection. Use **Use anyway…**
      to keep both, at the cost of a much larger inverter.
    """)

    st.subheader("Battery Backup")
    st.markdown("""
    Usable energy = bank voltage × capacity (Ah) × number of batteries × depth of discharge.
    Estimated backup = usable energy ÷ running load. This is a linear estimate; real runtime
    depends on battery chemistry, age, temperature and inverter efficiency.
    """)
