"""Constants for inverter load sizing calculations."""

# Electrical assumptions
POWER_FACTOR = 0.8
SAFETY_MARGIN = 1.2  # 20% headroom on top of running load + surge
SURGE_DIVERSITY = 0.5  # Only 50% of the worst motor surge is applied

# Warning / recommendation thresholds
SURGE_DOMINANCE_RATIO = 0.8  # Adjusted surge above 80% of running load
HIGH_SURGE_MULTIPLIER = 3
VENTILATION_KVA_THRESHOLD = 5

# Standard inverter ratings (kVA), ascending
INVERTER_SIZES = [1.5, 2.5, 3.5, 5, 7.5, 10, 15, 20]

# Battery bank options
BATTERY_VOLTAGES = [12, 24, 48]
BATTERY_CAPACITIES_AH = [100, 150, 200, 220, 250]
BATTERY_COUNT_RANGE = (1, 8)
BATTERY_DOD_RANGE = (0.5, 1.0)

DEFAULT_BATTERY = {
    "voltage": 24,
    "capacity_ah": 200,
    "count": 2,
    "dod": 0.5,
}

# Branding / contact
COMPANY_NAME = "InverterSize"
REPORT_TITLE = "Solar Inverter Load Report"
CONTACT_WHATSAPP_NUMBER = "2340000000000"
CONTACT_EMAIL = "engineers@invertersize.example"
CONTACT_SUBJECT = "Inverter Calculator Inquiry"
