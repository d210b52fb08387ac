# Structural verification engines
from .wind_engine import WindEngine, wind_speed_sweep
from .load_combiner import LoadCombiner
from .section_engine import SectionEngine, check_section
from .anchor_engine import AnchorEngine, compute_anchor_tensions, concrete_tension_capacity
from .base_plate_engine import BasePlateEngine, compute_plate_thickness
from .foundation_engine import FoundationEngine, evaluate_foundation, classify_contact
from .design_check import run_design_check
