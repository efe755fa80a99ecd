# ──────────────────────────────────────────────────────────────────────────────
# File: hpadvisor/constants.py
# Physical constants and model assumptions shared by the calculation stages
# ──────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

# Groningen gas average
GAS_ENERGY_CONTENT_KWH_PER_M3 = 9.769
# Typical older condensing boiler (CV ketel)
BOILER_EFFICIENCY = 0.90
# Dutch climate, space heating
FULL_LOAD_HOURS = 1800.0

# Domestic hot water: heating from 10 °C to 55 °C
DHW_DELTA_T_K = 45.0
WATER_SPECIFIC_HEAT_KJ_PER_KG_K = 4.186
KJ_PER_KWH = 3600.0
DAYS_PER_YEAR = 365

# CO2 emission factors
GAS_KG_CO2_PER_M3 = 1.88
ELECTRICITY_KG_CO2_PER_KWH = 0.40

# Bivalent point that serves hot water with the heat pump too
ALL_ELECTRIC_BIVALENT_POINT = "-10"

# Sizing
MAX_UNITS_PER_SITE = 50

# Synthetic heat pump profile
HEATING_THRESHOLD_C = 15.0
DEFAULT_OUTDOOR_TEMP_C = 10.0
COP_REFERENCE_TEMP_C = 7.0       # A7/W35
COP_GAIN_PER_K = 0.01            # above reference
COP_DROP_PER_K = 0.025           # below reference
COP_MIN = 2.0

OCCUPIED_FACTOR = 1.0
NIGHT_SETBACK_FACTOR = 0.3
NIGHT_SETBACK_END_HOUR = 6
PREHEAT_FACTOR = 1.2
PREHEAT_HOURS = 2
POST_OCCUPANCY_FACTOR = 0.7
POST_OCCUPANCY_HOURS = 2
UNOCCUPIED_FACTOR = 0.5

# Smart steering
CHEAP_PRICE_RATIO = 0.8
EXPENSIVE_PRICE_RATIO = 1.2
DEFAULT_MAX_SHIFT_RATIO = 0.7
DEFAULT_BUFFER_CAPACITY_KWH = 50.0
DEFAULT_PRICE_CT_PER_KWH = 22.5

# Hybrid boiler fallback during grid exceedances
FALLBACK_GAS_LOAD_SHARE = 0.5
FALLBACK_ELEC_REDUCTION_SHARE = 0.3

DEFAULT_ANALYSIS_YEAR = 2024
DEFAULT_INTERVAL_MINUTES = 60
