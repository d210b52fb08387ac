"""
Engineering Constants for Sign Support Structural Checks
"""

# Gravity
G = 9.8  # m/s²

# Wind
WIND_Q0_FACTOR = 0.613  # q0 = 0.613 V² (N/m²)
WIND_SWEEP_SPEEDS = tuple(range(20, 51, 2))  # m/s, what-if series

# Load distribution lever arms (m)
# Simplified bracket offsets, stand-ins for a detailed eccentricity analysis
PROJECTING_LEVER_ARM = 0.8
WALL_LEVER_ARM = 0.1

# Allowable stress design (short-term)
ALLOWABLE_STRESS_FACTOR = 2.0 / 3.0  # σa = (2/3) Fy

# Member limits
SLENDERNESS_LIMIT = 200.0

# Anchor group
# Tension distribution always uses a 2×2 rigid layout, shear is always split
# over four anchors regardless of the selected quantity.
ANCHOR_LAYOUT_COUNT = 4
ANCHOR_SHEAR_DIVISOR = 4
ANCHOR_QTY_CANDIDATES = (4, 6, 8, 10)

# Concrete-side anchor tension (safety-side simplified cone model)
ANCHOR_CONC_K = 7.0
ANCHOR_CONC_PHI = 0.75
ANCHOR_CONC_PSI_EDGE = 0.85
ANCHOR_CONC_PSI_CRACK = 0.85

# Embedment multipliers (× d)
HEF_FREESTANDING_FACTOR = 20
HEF_DEFAULT_FACTOR = 10

# Edge / spacing defaults (× d) when the catalog omits them
MIN_EDGE_FACTOR = 1.5
MIN_SPACING_FACTOR = 3.0

# Base plate
PLATE_T_OPTIONS = (16, 19, 22, 25, 28, 32, 36)  # mm stock thicknesses
PLATE_MIN_CLEAR = 10.0     # mm
PLATE_MIN_ROW_SPACING = 40.0  # mm
PLATE_AUTO_MARGIN = 2.0    # mm added before snapping in auto design

# Foundation
PASSIVE_KP = 3.0  # representative granular soil (φ ≈ 30°)
CONCRETE_BEARING_FACTOR = 0.25  # bearing allowable ≤ 0.25 Fc
PASSIVE_ETA_MIN = 0.1
PASSIVE_ETA_MAX = 1.0
EMBED_AUTO_OFFSET = 0.1  # m, z = H - 0.1 when following thickness

# Foundation optimizer grid (m)
OPT_B_RANGE = (0.6, 2.0)
OPT_D_RANGE = (0.6, 2.0)
OPT_H_RANGE = (0.4, 2.0)
OPT_STEP = 0.05
OPT_RESCUE_SCALE = 100000.0
OPT_ADOPT_DIGITS = 2

# Numeric floors
EPS_MODULUS = 1e-12   # m³
EPS_RADIUS = 1e-6     # m
EPS = 1e-9

# Catalog fallbacks for sections without Z or r
DEFAULT_Z_CM3 = 50.0
DEFAULT_R_CM = 3.0
