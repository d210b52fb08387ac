# Core data, catalogs and configuration
from .data_models import (
    DesignInputs,
    PanelInput,
    WindInput,
    MemberInput,
    AnchorInput,
    PlateInput,
    FoundationInput,
    FoundationGeometry,
    ReportInput,
    SignType,
    WindCoefficientMode,
    BendAxis,
    FoundationShape,
    ContactMode,
    OptimizationObjective,
    ForceUnit,
    RoundingMode,
)
from .catalogs import (
    SectionSpec,
    AnchorSpec,
    DEFAULT_SECTIONS,
    DEFAULT_ANCHORS,
    ABR_ANCHORS,
    load_section_catalog,
    load_anchor_catalog,
    snap_plate_thickness,
)
from .config import normalize, to_config, config_from_dict, save_config, load_config, ConfigError
from .settings import EngineSettings, configure_logging
