'''Hyperbolic orbital element sets
OrbitalElementSet, BodyDescriptor and ElementCatalog definitions'''

import numpy as np
import pandas as pd
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Union

from .config import config
from .constants import AU_PER_DAY_TO_KM_PER_S, GM_SUN_AU3_DAY2
from .errors import InvalidOrbitError
from .kepler import mean_anomaly_from_hyperbolic
from .utils import EpochLike, as_timestamp, validation_error


class OrbitalElementSet:
    """
    Classical elements of a heliocentric hyperbolic orbit.

    OrbitalElementSet is immutable. Elements are checked when the object is
    built, never at use time: a set that exists is a valid hyperbola.

    Parameters
    ----------
    e : float
        Eccentricity, must be > 1
    q : float
        Perihelion distance [AU], must be > 0
    i : float
        Inclination [deg], 0-180
    omega : float
        Argument of periapsis ω [deg]
    node : float
        Longitude of ascending node Ω [deg]
    tp : str, datetime or pd.Timestamp
        Time of perihelion passage (naive values are taken as UTC)
    epoch : str, datetime or pd.Timestamp, optional
        Osculation epoch of the published solution
    source : str, optional
        Where the elements were published

    Raises
    ------
    InvalidOrbitError
        If e <= 1, q <= 0, or any element is not finite
    """
    # ========== CLASS CONSTANTS ==========
    REQUIRED_FIELDS = ('e', 'q', 'i', 'omega', 'node', 'tp')

    # ========== CONSTRUCTION ==========
    def __init__(self, e: float, q: float, i: float, omega: float, node: float,
                 tp: EpochLike, epoch: Optional[EpochLike] = None,
                 source: Optional[str] = None):
        try:
            elements = np.array([e, q, i, omega, node], dtype=float)
        except (TypeError, ValueError) as exc:
            raise InvalidOrbitError(f"Orbital elements must be numeric: {exc}") from exc
        try:
            tp = as_timestamp(tp)
            epoch = as_timestamp(epoch) if epoch is not None else None
        except (TypeError, ValueError) as exc:
            raise InvalidOrbitError(f"Invalid perihelion or osculation epoch: {exc}") from exc

        self._elements = elements
        self._elements.flags.writeable = False
        self._tp = tp
        self._epoch = epoch
        self._source = source
        self._validate()

    @classmethod
    def from_dict(cls, record: Mapping) -> "OrbitalElementSet":
        """
        Build an element set from a plain mapping.

        Parameters
        ----------
        record : Mapping
            Must contain REQUIRED_FIELDS; 'epoch' and 'source' are optional

        Raises
        ------
        InvalidOrbitError
            If required fields are missing or the elements are invalid
        """
        missing = [f for f in cls.REQUIRED_FIELDS
                   if f not in record or record[f] is None]
        if missing:
            raise InvalidOrbitError(f"Element record missing required fields: {missing}")
        return cls(
            e=record['e'], q=record['q'], i=record['i'],
            omega=record['omega'], node=record['node'], tp=record['tp'],
            epoch=record.get('epoch'), source=record.get('source'),
        )

    # ========== VALIDATION ==========
    def _validate(self):
        """Reject non-hyperbolic sets, range-check the angles."""
        if not np.all(np.isfinite(self._elements)):
            raise InvalidOrbitError(f"Elements contain NaN or Inf: {self._elements}")
        e, q, i, omega, node = self._elements
        if e <= 1:
            raise InvalidOrbitError(
                f"Hyperbolic engine requires e > 1, got e={e}"
            )
        if q <= 0:
            raise InvalidOrbitError(
                f"Perihelion distance must be positive, got q={q}"
            )
        if i < 0 or i > 180:
            validation_error(f"Inclination out of range [0, 180] deg: {i}")
        if abs(omega) > 360:
            validation_error(f"Argument of periapsis out of range: {omega}")
        if abs(node) > 360:
            validation_error(f"Longitude of ascending node out of range: {node}")

    # ========== PROPERTY ACCESS ==========
    @property
    def elements(self) -> np.ndarray:
        """Read-only array [e, q, i, omega, node]"""
        return self._elements

    @property
    def e(self) -> float:
        return float(self._elements[0])

    @property
    def q(self) -> float:
        """Perihelion distance [AU]"""
        return float(self._elements[1])

    @property
    def i(self) -> float:
        """Inclination [deg]"""
        return float(self._elements[2])

    @property
    def omega(self) -> float:
        """Argument of periapsis [deg]"""
        return float(self._elements[3])

    @property
    def node(self) -> float:
        """Longitude of ascending node [deg]"""
        return float(self._elements[4])

    @property
    def tp(self) -> pd.Timestamp:
        """Time of perihelion passage (UTC)"""
        return self._tp

    @property
    def epoch(self) -> Optional[pd.Timestamp]:
        return self._epoch

    @property
    def source(self) -> Optional[str]:
        return self._source

    # ========== DERIVED QUANTITIES ==========
    @property
    def a(self) -> float:
        """Semi-major axis q/(1-e) [AU], negative for a hyperbola"""
        return self.q / (1.0 - self.e)

    @property
    def semi_latus_rectum(self) -> float:
        """p = q(1+e) [AU]"""
        return self.q * (1.0 + self.e)

    @property
    def mean_motion(self) -> float:
        """Hyperbolic mean motion sqrt(GM/|a|^3) [rad/day]"""
        return float(np.sqrt(GM_SUN_AU3_DAY2 / abs(self.a)**3))

    @property
    def v_infinity(self) -> float:
        """Hyperbolic excess speed sqrt(GM/|a|) [km/s]"""
        return float(np.sqrt(GM_SUN_AU3_DAY2 / abs(self.a)) * AU_PER_DAY_TO_KM_PER_S)

    @property
    def asymptote_anomaly(self) -> float:
        """Limiting true anomaly arccos(-1/e) [rad]"""
        return float(np.arccos(-1.0 / self.e))

    def days_to_distance(self, r: float) -> float:
        """
        Time from perihelion until the body reaches heliocentric distance r.

        Parameters
        ----------
        r : float
            Heliocentric distance [AU], must be >= q

        Returns
        -------
        float
            Days after perihelion (the inbound crossing is the negative of
            this value)
        """
        if r < self.q:
            raise ValueError(f"Distance {r} AU is inside perihelion q={self.q} AU")
        cosh_H = (1.0 + r / abs(self.a)) / self.e
        H = float(np.arccosh(max(cosh_H, 1.0)))
        return mean_anomaly_from_hyperbolic(H, self.e) / self.mean_motion

    # ========== UTILITY METHODS ==========
    def to_dict(self) -> dict:
        return {
            'e': self.e, 'q': self.q, 'i': self.i,
            'omega': self.omega, 'node': self.node, 'tp': self.tp,
            'epoch': self.epoch, 'source': self.source,
        }

    def replace(self, **changes) -> "OrbitalElementSet":
        """Return a new, re-validated element set with some fields changed."""
        record = self.to_dict()
        unknown = set(changes) - set(record)
        if unknown:
            raise TypeError(f"Unknown element fields: {sorted(unknown)}")
        record.update(changes)
        return OrbitalElementSet.from_dict(record)

    # ========== SPECIAL METHODS ==========
    def __repr__(self):
        return (f"OrbitalElementSet(e={self.e}, q={self.q}, i={self.i}, "
                f"omega={self.omega}, node={self.node}, "
                f"tp='{self.tp.isoformat()}')")

    def __str__(self):
        lines = ["Hyperbolic Orbital Elements:"]
        lines.append(f"  e     = {self.e:.8f}")
        lines.append(f"  q     = {self.q:.8f} AU")
        lines.append(f"  i     = {self.i:.6f} deg")
        lines.append(f"  omega = {self.omega:.6f} deg")
        lines.append(f"  node  = {self.node:.6f} deg")
        lines.append(f"  tp    = {self.tp.isoformat()}")
        if self.source:
            lines.append(f"  source: {self.source}")
        return "\n".join(lines)

    def __eq__(self, other):
        if not isinstance(other, OrbitalElementSet):
            return NotImplemented
        return (np.allclose(self._elements, other._elements,
                            rtol=config.EQUALITY_RTOL, atol=config.EQUALITY_ATOL)
                and self.tp == other.tp)

    def __hash__(self):
        rounded = tuple(np.round(self._elements, config.HASH_DECIMALS))
        return hash((rounded, self.tp))


@dataclass(frozen=True)
class BodyDescriptor:
    """
    A named body and its element set.

    Attributes
    ----------
    name : str
        Body identifier (e.g. '3I/ATLAS')
    elements : OrbitalElementSet
        Validated hyperbolic elements
    """
    name: str
    elements: OrbitalElementSet

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError(f"Body name must be a non-empty string, got {self.name!r}")
        if not isinstance(self.elements, OrbitalElementSet):
            raise TypeError(
                f"elements must be an OrbitalElementSet, got {type(self.elements).__name__}"
            )


class ElementCatalog(Mapping):
    """
    Immutable, validated mapping of body name -> OrbitalElementSet.

    Parameters
    ----------
    bodies : iterable of BodyDescriptor, or Mapping of name -> OrbitalElementSet

    Raises
    ------
    ValueError
        If a name appears twice
    TypeError
        If an entry is not an OrbitalElementSet
    """

    def __init__(self, bodies: Union[Iterable[BodyDescriptor],
                                     Mapping[str, OrbitalElementSet]] = ()):
        if isinstance(bodies, Mapping):
            bodies = [BodyDescriptor(name, elems) for name, elems in bodies.items()]
        entries = {}
        for body in bodies:
            if not isinstance(body, BodyDescriptor):
                raise TypeError(f"Expected BodyDescriptor, got {type(body).__name__}")
            if body.name in entries:
                raise ValueError(f"Duplicate body name in catalog: '{body.name}'")
            entries[body.name] = body.elements
        self._entries = MappingProxyType(entries)

    # ========== FACTORY METHODS ==========
    @classmethod
    def from_records(cls, records: Mapping[str, Mapping]) -> "ElementCatalog":
        """
        Build a catalog from loosely-typed per-body records.

        Parameters
        ----------
        records : Mapping
            name -> {'e', 'q', 'i', 'omega', 'node', 'tp', ...}

        Raises
        ------
        InvalidOrbitError
            Naming the offending body, if any record is incomplete or invalid
        """
        bodies = []
        for name, record in records.items():
            try:
                bodies.append(BodyDescriptor(name, OrbitalElementSet.from_dict(record)))
            except InvalidOrbitError as exc:
                raise InvalidOrbitError(f"Body '{name}': {exc}") from exc
        return cls(bodies)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame, name_column: Optional[str] = None
                       ) -> "ElementCatalog":
        """
        Build a catalog from a pandas DataFrame.

        Parameters
        ----------
        df : pd.DataFrame
            One row per body with columns e, q, i, omega, node, tp
            (epoch and source optional)
        name_column : str, optional
            Column holding body names. If None, the index is used.
        """
        missing = [c for c in OrbitalElementSet.REQUIRED_FIELDS if c not in df.columns]
        if missing:
            raise InvalidOrbitError(f"DataFrame missing required columns: {missing}")
        names = df[name_column] if name_column is not None else df.index
        records = {}
        for name, (_, row) in zip(names, df.iterrows()):
            record = {k: (None if pd.isna(v) else v) for k, v in row.items()}
            records[str(name)] = record
        return cls.from_records(records)

    # ========== MAPPING INTERFACE ==========
    def __getitem__(self, name: str) -> OrbitalElementSet:
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    # ========== UTILITY METHODS ==========
    def descriptors(self) -> list:
        return [BodyDescriptor(name, elems) for name, elems in self._entries.items()]

    def to_dataframe(self) -> pd.DataFrame:
        """Export the catalog as a DataFrame indexed by body name."""
        rows = [self._entries[name].to_dict() for name in self._entries]
        return pd.DataFrame(rows, index=pd.Index(list(self._entries), name='name'))

    def __repr__(self):
        return f"ElementCatalog({list(self._entries)})"
