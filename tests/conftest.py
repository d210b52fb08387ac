import sys
from dataclasses import replace
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from signcalc.core.config import normalize
from signcalc.core.data_models import (
    DesignInputs,
    FoundationGeometry,
    FoundationInput,
    PanelInput,
    SignType,
)


@pytest.fixture
def default_inputs() -> DesignInputs:
    """Free-standing 3.0 × 2.0 m sign, V0 = 34 m/s, normalized."""
    return normalize(DesignInputs())


@pytest.fixture
def projecting_inputs() -> DesignInputs:
    """Projecting sign on the general anchor catalog."""
    return normalize(DesignInputs(panel=PanelInput(sign_type=SignType.PROJECTING)))


@pytest.fixture
def wall_inputs() -> DesignInputs:
    return normalize(DesignInputs(panel=PanelInput(sign_type=SignType.WALL)))


@pytest.fixture
def large_footing() -> FoundationGeometry:
    """2.0 × 2.0 × 1.0 m pad, N = 117 600 N without superstructure weight."""
    return FoundationGeometry(width_b=2.0, depth_d=2.0, thickness_h=1.0, embed_depth_z=0.7)


@pytest.fixture
def foundation_input() -> FoundationInput:
    return FoundationInput()


@pytest.fixture
def with_foundation():
    """Helper replacing foundation fields of a DesignInputs."""
    def _apply(inputs: DesignInputs, **changes) -> DesignInputs:
        return replace(inputs, foundation=replace(inputs.foundation, **changes))
    return _apply
