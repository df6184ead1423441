"""
Xenos: Hyperbolic Trajectory Engine

A Python package for two-body heliocentric position and speed of unbound
(hyperbolic) bodies such as interstellar objects, and for deterministic
observed/projected trajectory sampling.
"""

# Configuration
from .config import config, temp_config

# Errors
from .errors import (
    XenosError,
    InvalidOrbitError,
    NonConvergenceError,
    MissingElementsError,
    PrecisionWarning,
)

# Core classes and operations
from .kepler import KeplerSolution, solve_hyperbolic_kepler
from .elements import OrbitalElementSet, BodyDescriptor, ElementCatalog
from .evaluator import (
    HeliocentricState,
    StateOverride,
    evaluate,
    approximate_geocentric_speed,
    relative_speed,
)
from .trajectory import StatePoint, Trajectory, sample_trajectory, sample_orbit_path
from .batch import BodyResult, BatchResult, evaluate_batch

# Published element sets
from .defaults import ATLAS_3I, ATLAS_3I_MPEC, C2025_K1, C2024_E1, DEFAULT_CATALOG

# Package metadata
__version__ = "0.1.0"

# Define what gets imported with "from xenos import *"
__all__ = [
    # Configuration
    "config",
    "temp_config",
    # Errors
    "XenosError",
    "InvalidOrbitError",
    "NonConvergenceError",
    "MissingElementsError",
    "PrecisionWarning",
    # Classes
    "KeplerSolution",
    "OrbitalElementSet",
    "BodyDescriptor",
    "ElementCatalog",
    "HeliocentricState",
    "StateOverride",
    "StatePoint",
    "Trajectory",
    "BodyResult",
    "BatchResult",
    # Operations
    "solve_hyperbolic_kepler",
    "evaluate",
    "approximate_geocentric_speed",
    "relative_speed",
    "sample_trajectory",
    "sample_orbit_path",
    "evaluate_batch",
    # Element sets
    "ATLAS_3I",
    "ATLAS_3I_MPEC",
    "C2025_K1",
    "C2024_E1",
    "DEFAULT_CATALOG",
]
