# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Core data structures for broadcast ephemeris processing"""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Optional

import numpy as np

from .constants import *
from .exceptions import DataNotLoaded
from .satellite_numbering import sat_to_id

# Fields that must be populated before a record can be validated or propagated
REQUIRED_FIELDS = (
    'sat', 'toe', 'transmit_time',
    'A', 'e', 'i0', 'OMG0', 'omg', 'M0', 'deln', 'OMGd', 'idot',
    'cuc', 'cus', 'crc', 'crs', 'cic', 'cis',
    'f0', 'f1', 'f2',
)

# Derived fields, excluded when comparing message content
_DERIVED_FIELDS = ('begin_valid', 'end_valid')


@dataclass(frozen=True)
class BroadcastRecord:
    """One navigation message's worth of orbit and clock parameters.

    All times are continuous seconds since the epoch of the satellite's own
    time system (``week * 604800 + tow``). Records are immutable; the
    validity window is attached by the ephemeris store through
    :meth:`with_validity`, which returns a new record.

    Attributes
    ----------
    sat : int
        Internal satellite number
    transmit_time : float
        Transmission time of the message (s)
    toe : float
        Reference epoch of the orbital elements (s)
    toc : float
        Reference epoch of the clock polynomial (s), defaults to toe
    iodc, iode : int
        Issue of data, clock / ephemeris
    week : int
        Week number of toe in the record's time system
    A, Adot : float
        Semi-major axis (m) and its rate (m/s)
    e : float
        Eccentricity
    i0, idot : float
        Inclination at toe (rad) and its rate (rad/s)
    OMG0, OMGd : float
        Longitude of ascending node at weekly epoch (rad) and its rate (rad/s)
    omg : float
        Argument of perigee (rad)
    M0 : float
        Mean anomaly at toe (rad)
    deln, delnd : float
        Mean motion difference (rad/s) and its rate (rad/s^2)
    cuc, cus, crc, crs, cic, cis : float
        Second-harmonic corrections to argument of latitude (rad),
        radius (m) and inclination (rad)
    f0, f1, f2 : float
        Clock bias (s), drift (s/s) and drift rate (s/s^2)
    tgd : tuple of float
        Group delays (s)
    svh : int
        Health code
    sva : int
        User range accuracy index
    fit : float
        Fit interval (h), 0 if not broadcast
    begin_valid, end_valid : float or None
        Validity window, set by the validity calculator
    """
    sat: Optional[int] = None
    transmit_time: Optional[float] = None
    toe: Optional[float] = None
    toc: Optional[float] = None
    iodc: int = 0
    iode: int = 0
    week: int = 0

    A: Optional[float] = None
    Adot: float = 0.0
    e: Optional[float] = None
    i0: Optional[float] = None
    idot: Optional[float] = None
    OMG0: Optional[float] = None
    OMGd: Optional[float] = None
    omg: Optional[float] = None
    M0: Optional[float] = None
    deln: Optional[float] = None
    delnd: float = 0.0

    cuc: Optional[float] = None
    cus: Optional[float] = None
    crc: Optional[float] = None
    crs: Optional[float] = None
    cic: Optional[float] = None
    cis: Optional[float] = None

    f0: Optional[float] = None
    f1: Optional[float] = None
    f2: Optional[float] = None
    tgd: tuple = (0.0, 0.0)

    svh: int = 0
    sva: int = 0
    fit: float = 0.0

    begin_valid: Optional[float] = None
    end_valid: Optional[float] = None

    def __post_init__(self):
        if self.toc is None and self.toe is not None:
            object.__setattr__(self, 'toc', self.toe)
        object.__setattr__(self, 'tgd', tuple(self.tgd))

    @property
    def missing_fields(self) -> tuple:
        """Names of required fields that are still unset"""
        return tuple(name for name in REQUIRED_FIELDS if getattr(self, name) is None)

    @property
    def data_loaded(self) -> bool:
        """True when every required field is populated"""
        return not self.missing_fields

    def require_loaded(self) -> None:
        """Raise DataNotLoaded unless every required field is populated"""
        missing = self.missing_fields
        if missing:
            raise DataNotLoaded(missing=missing)

    @property
    def has_validity(self) -> bool:
        return self.begin_valid is not None and self.end_valid is not None

    @property
    def system(self) -> int:
        return sat2sys(self.sat) if self.sat is not None else SYS_NONE

    @property
    def prn(self) -> int:
        return sat2prn(self.sat) if self.sat is not None else 0

    @property
    def sat_id(self) -> str:
        return sat_to_id(self.sat) if self.sat is not None else "---"

    @property
    def toe_tow(self) -> float:
        """Time of week of toe"""
        return self.toe % WEEK_SECONDS

    def with_validity(self, begin_valid: float, end_valid: float) -> 'BroadcastRecord':
        """Return a copy carrying the given validity window"""
        return replace(self, begin_valid=float(begin_valid), end_valid=float(end_valid))

    def same_data(self, other: 'BroadcastRecord', ignore=()) -> bool:
        """Compare message content, ignoring the derived validity window
        and any field named in ``ignore``"""
        for f in fields(self):
            if f.name in _DERIVED_FIELDS or f.name in ignore:
                continue
            if getattr(self, f.name) != getattr(other, f.name):
                return False
        return True


class OrbitModel(Enum):
    """Frame-rotation variant used by the orbit propagator.

    STANDARD : int
        Kepler + harmonic corrections rotated by node and inclination
    GEOSTATIONARY : int
        BeiDou GEO path with the extra tilt and Earth-rotation rotations
    """
    STANDARD = 1
    GEOSTATIONARY = 2


@dataclass(eq=False)
class OrbitState:
    """Satellite kinematic and clock state at one instant.

    Attributes
    ----------
    pos : np.ndarray
        ECEF position (m), shape (3,)
    vel : np.ndarray
        ECEF velocity (m/s), shape (3,)
    clock_bias : float
        Clock polynomial bias (s)
    clock_drift : float
        Clock polynomial drift (s/s)
    relcorr : float
        Relativistic clock correction (s)
    frame : str
        Reference frame of pos/vel
    sat : int
        Satellite number
    time : float
        Query time (s, system time)
    model : OrbitModel
        Propagation variant that produced the state
    """
    pos: np.ndarray = field(default_factory=lambda: np.zeros(3))
    vel: np.ndarray = field(default_factory=lambda: np.zeros(3))
    clock_bias: float = 0.0
    clock_drift: float = 0.0
    relcorr: float = 0.0
    frame: str = "ECEF"
    sat: int = 0
    time: float = 0.0
    model: OrbitModel = OrbitModel.STANDARD

    @property
    def clock_correction(self) -> float:
        """Clock bias including the relativistic term (s)"""
        return self.clock_bias + self.relcorr

    @property
    def radius(self) -> float:
        return float(np.linalg.norm(self.pos))
