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

"""Satellite clock computation and correction"""

import math

from ..core.constants import *
from ..core.constellation import get_profile
from ..core.data_structures import BroadcastRecord


def clock_bias(eph: BroadcastRecord, time: float) -> float:
    """
    Compute satellite clock bias from the clock polynomial

    Parameters:
    -----------
    eph : BroadcastRecord
        Broadcast record
    time : float
        Time of interest (s, system time)

    Returns:
    --------
    float
        Clock bias (s), relativity not included
    """
    eph.require_loaded()
    dt = time - eph.toc
    return eph.f0 + eph.f1 * dt + eph.f2 * dt**2


def clock_drift(eph: BroadcastRecord, time: float) -> float:
    """Compute satellite clock drift (s/s) from the clock polynomial"""
    eph.require_loaded()
    dt = time - eph.toc
    return eph.f1 + 2.0 * eph.f2 * dt


def relativity(eph: BroadcastRecord, E: float) -> float:
    """
    Relativistic clock correction for an eccentric orbit.

    dtr = F * e * sqrt(A) * sin(E) with F = -2 * sqrt(mu) / c^2, using the
    gravitational constant of the record's constellation.

    Parameters
    ----------
    eph : BroadcastRecord
        Broadcast record
    E : float
        Eccentric anomaly at the time of interest (rad)

    Returns
    -------
    float
        Correction (s), to be added to the clock bias
    """
    mu = get_profile(eph.system).mu
    F = -2.0 * math.sqrt(mu) / CLIGHT**2
    return F * eph.e * math.sqrt(eph.A) * math.sin(E)


def group_delay(eph: BroadcastRecord, freq_idx: int = 0) -> float:
    """
    Time group delay for a signal of the record's constellation.

    Parameters
    ----------
    eph : BroadcastRecord
        Broadcast record with its ``tgd`` tuple
    freq_idx : int
        Frequency index:
        - GPS/QZSS: 0 L1, 1 L2 (TGD scaled by gamma = (f1/f2)^2)
        - BeiDou: 0 B1 (TGD1), 1 B2 (TGD2), 2 B3 (reference, 0)
        - Galileo: 0 E1/E5a BGD, 1 E5b/E1 BGD

    Returns
    -------
    float
        Group delay (s), 0 when the record carries none for the index
    """
    sys = eph.system

    if sys in (SYS_GPS, SYS_QZS):
        if freq_idx == 0:
            return eph.tgd[0]
        elif freq_idx == 1:
            gamma = (FREQ_L1 / FREQ_L2)**2
            return gamma * eph.tgd[0]
    elif sys == SYS_BDS:
        # B3 is the BeiDou clock reference signal
        if freq_idx < 2 and len(eph.tgd) > freq_idx:
            return eph.tgd[freq_idx]
    elif sys == SYS_GAL:
        if len(eph.tgd) > freq_idx:
            return eph.tgd[freq_idx]

    return 0.0
