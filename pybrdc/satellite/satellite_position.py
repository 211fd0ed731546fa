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

"""Satellite position, velocity and clock from broadcast ephemeris.

The Keplerian part (Kepler's equation, true anomaly, second-harmonic
corrections, in-plane position and rates) is shared. What differs between
satellite classes is only the rotation from the orbital plane into the
Earth-fixed frame, so the two variants are entries of a dispatch table keyed
by :class:`OrbitModel`:

- ``STANDARD``: node longitude corrected for Earth rotation, then node and
  inclination rotations (GPS, Galileo, QZSS, BeiDou IGSO/MEO).
- ``GEOSTATIONARY``: node longitude in an inertial-like frame, then
  R_Z(omge * tk) * R_X(tilt) (BeiDou GEO, ICD section 5.2.4.12).

Velocities are analytic time derivatives of the same expressions.
"""

import logging
import math
from dataclasses import dataclass, fields
from typing import Callable, Optional, Union

import numpy as np

from ..core.constants import *
from ..core.constellation import PROFILES, ConstellationProfile
from ..core.data_structures import BroadcastRecord, OrbitModel, OrbitState
from ..core.exceptions import InvalidRequest
from ..core.satellite_numbering import is_beidou_geo
from ..core.time import GNSSTime, to_seconds
from ..logger import LogLevel
from .clock import clock_bias, clock_drift, relativity
from .kepler import solve_kepler

logger = logging.getLogger(__name__)

TraceHook = Callable[[str, dict], None]


@dataclass
class PropagatorConfig:
    """Numerical settings of the orbit propagator.

    Attributes
    ----------
    kepler_max_iter : int
        Kepler iteration cap
    kepler_tol : float
        Kepler convergence threshold on |dE| (rad)
    geo_tilt_deg : float
        Tilt of the BeiDou GEO reference frame about the X axis (deg)
    """
    kepler_max_iter: int = KEPLER_MAX_ITER
    kepler_tol: float = KEPLER_TOL
    geo_tilt_deg: float = BDS_GEO_TILT_DEG

    @classmethod
    def from_dict(cls, config: dict) -> 'PropagatorConfig':
        """Build from a dictionary, ignoring unknown keys"""
        names = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in config.items() if k in names})


@dataclass
class _PlaneState:
    """Orbital-plane quantities shared by both frame rotations"""
    E: float
    n_iter: int
    xp: float
    yp: float
    vxp: float
    vyp: float
    inc: float
    inc_dot: float


def orbit_model(sat: int) -> OrbitModel:
    """Select the frame-rotation variant for a satellite"""
    if is_beidou_geo(sat):
        return OrbitModel.GEOSTATIONARY
    return OrbitModel.STANDARD


def logging_trace(step: str, values: dict) -> None:
    """Trace hook forwarding intermediate values to the module logger at TRACE level"""
    logger.log(LogLevel.TRACE.value, "%s: %s", step, ", ".join(f"{k}={v!r}" for k, v in values.items()))


def _orbital_plane(eph: BroadcastRecord, tk: float, profile: ConstellationProfile,
                   config: PropagatorConfig, trace: Optional[TraceHook]) -> _PlaneState:
    """Solve Kepler's equation and build the corrected in-plane state"""
    Ak = eph.A + eph.Adot * tk
    n0 = math.sqrt(profile.mu / eph.A**3)
    n = n0 + eph.deln + 0.5 * eph.delnd * tk
    M = math.fmod(eph.M0 + n * tk, 2.0 * math.pi)
    Mdot = n0 + eph.deln + eph.delnd * tk

    E, n_iter = solve_kepler(M, eph.e, config.kepler_tol, config.kepler_max_iter)
    if trace is not None:
        trace("kepler", {"tk": tk, "M": M, "E": E, "iterations": n_iter})

    sinE = math.sin(E)
    cosE = math.cos(E)
    G = 1.0 - eph.e * cosE
    q = math.sqrt(1.0 - eph.e * eph.e)
    Edot = Mdot / G

    # True anomaly and argument of latitude
    nu = math.atan2(q * sinE, cosE - eph.e)
    nudot = Edot * q / G
    phi = nu + eph.omg
    s2p = math.sin(2.0 * phi)
    c2p = math.cos(2.0 * phi)

    # Second-harmonic corrections
    du = eph.cus * s2p + eph.cuc * c2p
    dr = eph.crs * s2p + eph.crc * c2p
    di = eph.cis * s2p + eph.cic * c2p
    u = phi + du
    r = Ak * G + dr
    inc = eph.i0 + eph.idot * tk + di

    udot = nudot * (1.0 + 2.0 * (eph.cus * c2p - eph.cuc * s2p))
    rdot = eph.Adot * G + Ak * eph.e * sinE * Edot + 2.0 * nudot * (eph.crs * c2p - eph.crc * s2p)
    inc_dot = eph.idot + 2.0 * nudot * (eph.cis * c2p - eph.cic * s2p)

    if trace is not None:
        trace("plane", {"nu": nu, "phi": phi, "u": u, "r": r, "i": inc})

    cosu = math.cos(u)
    sinu = math.sin(u)
    return _PlaneState(
        E=E, n_iter=n_iter,
        xp=r * cosu, yp=r * sinu,
        vxp=rdot * cosu - r * sinu * udot,
        vyp=rdot * sinu + r * cosu * udot,
        inc=inc, inc_dot=inc_dot,
    )


def _rotate_plane(plane: _PlaneState, omg: float, omgdot: float) -> tuple[np.ndarray, np.ndarray]:
    """Rotate the in-plane state by node longitude and inclination"""
    cosO = math.cos(omg)
    sinO = math.sin(omg)
    cosi = math.cos(plane.inc)
    sini = math.sin(plane.inc)
    xp, yp = plane.xp, plane.yp

    x = xp * cosO - yp * cosi * sinO
    y = xp * sinO + yp * cosi * cosO
    z = yp * sini

    vx = (plane.vxp * cosO - plane.vyp * cosi * sinO
          + yp * sini * sinO * plane.inc_dot - omgdot * y)
    vy = (plane.vxp * sinO + plane.vyp * cosi * cosO
          - yp * sini * cosO * plane.inc_dot + omgdot * x)
    vz = plane.vyp * sini + yp * cosi * plane.inc_dot

    return np.array([x, y, z]), np.array([vx, vy, vz])


def _standard_frame(eph, tk, plane, profile, config, trace):
    """Earth-fixed node longitude, then node/inclination rotation"""
    omg = eph.OMG0 + (eph.OMGd - profile.omge) * tk - profile.omge * eph.toe_tow
    if trace is not None:
        trace("node", {"OMG": omg})
    return _rotate_plane(plane, omg, eph.OMGd - profile.omge)


def _geo_frame(eph, tk, plane, profile, config, trace):
    """Inertial-like node rotation followed by R_Z(omge*tk) * R_X(tilt)"""
    omg = eph.OMG0 + eph.OMGd * tk - profile.omge * eph.toe_tow
    pos_gk, vel_gk = _rotate_plane(plane, omg, eph.OMGd)

    tilt = config.geo_tilt_deg * D2R
    cx, sx = math.cos(tilt), math.sin(tilt)
    rot_x = np.array([[1.0, 0.0, 0.0],
                      [0.0, cx, sx],
                      [0.0, -sx, cx]])

    angle = profile.omge * tk
    cz, sz = math.cos(angle), math.sin(angle)
    rot_z = np.array([[cz, sz, 0.0],
                      [-sz, cz, 0.0],
                      [0.0, 0.0, 1.0]])
    rot_z_dot = profile.omge * np.array([[-sz, cz, 0.0],
                                         [-cz, -sz, 0.0],
                                         [0.0, 0.0, 0.0]])

    tilted = rot_x @ pos_gk
    pos = rot_z @ tilted
    vel = rot_z @ (rot_x @ vel_gk) + rot_z_dot @ tilted

    if trace is not None:
        trace("geo", {"OMG": omg, "r_gk": pos_gk.tolist(), "r": pos.tolist(),
                      "|r_gk|": float(np.linalg.norm(pos_gk)),
                      "|r|": float(np.linalg.norm(pos))})
    return pos, vel


_FRAME_ROTATIONS = {
    OrbitModel.STANDARD: _standard_frame,
    OrbitModel.GEOSTATIONARY: _geo_frame,
}


class OrbitPropagator:
    """
    Compute satellite position, velocity and clock from a broadcast record.

    The propagator holds no mutable state; one instance can be shared by any
    number of callers and threads.

    Parameters
    ----------
    config : PropagatorConfig, optional
        Numerical settings, defaults to PropagatorConfig()
    trace : callable, optional
        Hook called as ``trace(step, values)`` with intermediate quantities.
        Use :func:`logging_trace` to route them to the logger.

    Examples
    --------
    >>> prop = OrbitPropagator()
    >>> state = prop.propagate(eph, t)
    >>> print(state.pos, state.clock_correction)
    """

    def __init__(self, config: Optional[PropagatorConfig] = None,
                 trace: Optional[TraceHook] = None):
        self.config = config if config is not None else PropagatorConfig()
        self.trace = trace

    def propagate(self, eph: BroadcastRecord, t: Union[float, GNSSTime]) -> OrbitState:
        """
        Propagate a broadcast record to time t.

        Parameters
        ----------
        eph : BroadcastRecord
            Broadcast record with all required fields
        t : float or GNSSTime
            Time of interest in the record's time system

        Returns
        -------
        OrbitState
            Position/velocity in the constellation's Earth-fixed frame,
            clock bias/drift and relativity correction

        Raises
        ------
        DataNotLoaded
            If the record lacks required fields
        InvalidRequest
            If the record's system has no Keplerian broadcast model
        KeplerNonConvergence
            If Kepler's equation does not converge within the cap
        """
        eph.require_loaded()
        profile = PROFILES.get(eph.system)
        if profile is None:
            raise InvalidRequest(f"No Keplerian broadcast model for sat {eph.sat}")

        time = to_seconds(t, profile.time_sys)
        tk = time - eph.toe
        model = orbit_model(eph.sat)

        plane = _orbital_plane(eph, tk, profile, self.config, self.trace)
        pos, vel = _FRAME_ROTATIONS[model](eph, tk, plane, profile, self.config, self.trace)

        return OrbitState(
            pos=pos,
            vel=vel,
            clock_bias=clock_bias(eph, time),
            clock_drift=clock_drift(eph, time),
            relcorr=relativity(eph, plane.E),
            frame=profile.frame,
            sat=eph.sat,
            time=time,
            model=model,
        )


def propagate(eph: BroadcastRecord, t: Union[float, GNSSTime],
              config: Optional[PropagatorConfig] = None,
              trace: Optional[TraceHook] = None) -> OrbitState:
    """Propagate a broadcast record to time t with a one-off propagator"""
    return OrbitPropagator(config, trace).propagate(eph, t)
