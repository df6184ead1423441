"""
Published Element Sets
======================

Snapshot of published orbital elements for the interstellar object 3I/ATLAS
and the hyperbolic comparison comets, plus a ready-made catalog.

All angles are in degrees (J2000 ecliptic), distances in AU, perihelion
times in UTC. Near-parabolic elliptical comparison comets (C/2025 R2 SWAN,
C/2025 A6 Lemmon) have e < 1 and are served by the planet/comet ephemeris
provider instead.

Examples
--------
>>> from xenos import DEFAULT_CATALOG, evaluate
>>> evaluate(DEFAULT_CATALOG['3I/ATLAS'], "2025-10-29T11:33:16Z")
"""
from .elements import BodyDescriptor, ElementCatalog, OrbitalElementSet

# 3I/ATLAS refined solution; authoritative set for the engine
ATLAS_3I = OrbitalElementSet(
    e=6.13941774, q=1.35638454, i=175.11310480,
    omega=128.01051367, node=322.15684249,
    tp='2025-10-29T11:33:16Z', epoch='2025-07-18',
    source='Refined orbit solution, epoch 2025-07-18'
)

# 3I/ATLAS discovery-era elements, kept for predicted-vs-actual comparisons
ATLAS_3I_MPEC = OrbitalElementSet(
    e=6.2769203, q=1.3745928, i=175.11669,
    omega=127.79317, node=322.27219,
    tp='2025-10-29T05:03:46Z', epoch='2025-07-18',
    source='MPC MPEC 2025-N12'
)

C2025_K1 = OrbitalElementSet(
    e=1.00153256, q=0.33543043, i=147.90080333,
    omega=270.79200919, node=97.48797247,
    tp='2025-10-08T00:00:00Z',
    source='JPL Small-Body Database'
)

C2024_E1 = OrbitalElementSet(
    e=1.00004883, q=0.56584101, i=75.23838445,
    omega=243.63942205, node=108.08299210,
    tp='2026-01-20T00:00:00Z',
    source='JPL Small-Body Database'
)

DEFAULT_CATALOG = ElementCatalog([
    BodyDescriptor('3I/ATLAS', ATLAS_3I),
    BodyDescriptor('C/2025 K1 (ATLAS)', C2025_K1),
    BodyDescriptor('C/2024 E1 (Wierzchos)', C2024_E1),
])
