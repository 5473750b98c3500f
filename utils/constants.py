"""
Constants used across the pipeflow calculator.

This module defines unit conversion factors, physical constants and the
numeric bounds of the friction-factor correlations.
"""

# Conversion factors to SI
GPM_to_M3S = 0.0000630902    # US GPM to m³/s
INCH_to_M = 0.0254           # inch to meter
FT_to_M = 0.3048             # foot to meter
PSI_to_PA = 6894.76          # psi to Pascal
BAR_to_PA = 100000.0         # bar to Pascal
KGFCM2_to_PA = 98066.5       # kgf/cm² to Pascal
MMHG_to_PA = 133.322         # mmHg to Pascal
ATM_to_PA = 101325.0         # standard atmosphere to Pascal
CENTIPOISE_to_PAS = 0.001    # centipoise to Pa·s
LBFT3_to_KGM3 = 16.0185      # lb/ft³ to kg/m³
LBH_to_KGS = 0.45359237 / 3600.0  # lb/h to kg/s
DEG_C_to_K = 273.15          # Celsius to Kelvin (offset)

# Standard conditions
P_ATM = 101325.0             # Atmospheric pressure for gauge/absolute conversion, Pa
R_UNIV = 8314.462            # Universal gas constant, J/(kmol·K)

# Physical constants
G_GRAVITY = 9.80665          # Standard gravity acceleration, m/s²
R_STEAM = 461.5              # Specific gas constant of water vapour, J/(kg·K)
MW_AIR = 28.96               # Molecular weight of air, kg/kmol

# Default values for pipe calculations
DEFAULT_ROUGHNESS = 4.5e-5   # Commercial steel, m

# Flow regime boundaries (Reynolds number)
RE_LAMINAR_MAX = 2300.0
RE_TURBULENT_MIN = 4000.0

# Petukhov smooth-pipe validity band
PETUKHOV_RE_MIN = 3000.0
PETUKHOV_RE_MAX = 5.0e6

# Relative roughness treated as a hydraulically smooth wall
SMOOTH_PIPE_EPS = 1e-9

# Nominal validity domain of the turbulent correlations
RELATIVE_ROUGHNESS_MAX = 0.05

# Band around the saturation temperature treated as "at saturation", K
SATURATION_TOLERANCE_K = 0.5

# Default speed of sound per fluid class, m/s (used by front-ends for Mach)
DEFAULT_SOUND_SPEED = {
    "steam": 450.0,
    "air": 343.0,
    "gas": 430.0,
}
