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

"""Per-constellation parameters used by stores, validity and propagation"""

from dataclasses import dataclass
from typing import Optional

from .constants import (BDS_VALIDITY_DURATION, DEFAULT_FIT_HOURS, MU_BDS,
                        MU_GAL, MU_GPS, OMGE_BDS, OMGE_GAL, OMGE_GPS, SYS_BDS,
                        SYS_GAL, SYS_GPS, SYS_QZS)


@dataclass(frozen=True)
class ConstellationProfile:
    """Constants and policies for one satellite system.

    Attributes
    ----------
    system : int
        System ID (SYS_GPS, SYS_BDS, ...)
    name : str
        Display name used in dumps and store names
    time_sys : str
        Time system of every record time ('GPS', 'GAL', 'BDS', 'QZS')
    mu : float
        Gravitational constant (m^3/s^2)
    omge : float
        Earth rotation rate (rad/s)
    fixed_duration : float or None
        Record lifetime after Toe (s). None means use the fit interval.
    default_fit_hours : float
        Fit interval assumed when a record carries none (h)
    healthy_code : int
        Health code value meaning "healthy"
    frame : str
        Reference frame of propagated positions
    """
    system: int
    name: str
    time_sys: str
    mu: float
    omge: float
    fixed_duration: Optional[float] = None
    default_fit_hours: float = DEFAULT_FIT_HOURS
    healthy_code: int = 0
    frame: str = "WGS84"


GPS_PROFILE = ConstellationProfile(
    system=SYS_GPS, name="GPS", time_sys='GPS', mu=MU_GPS, omge=OMGE_GPS,
)

GAL_PROFILE = ConstellationProfile(
    system=SYS_GAL, name="Galileo", time_sys='GAL', mu=MU_GAL, omge=OMGE_GAL, frame="GTRF",
)

# The BeiDou ICD mentions a fit interval but never defines it; records are
# used for one hour after Toe.
BDS_PROFILE = ConstellationProfile(
    system=SYS_BDS, name="BeiDou", time_sys='BDS', mu=MU_BDS, omge=OMGE_BDS,
    fixed_duration=BDS_VALIDITY_DURATION, frame="CGCS2000",
)

QZS_PROFILE = ConstellationProfile(
    system=SYS_QZS, name="QZSS", time_sys='QZS', mu=MU_GPS, omge=OMGE_GPS,
)

PROFILES = {p.system: p for p in (GPS_PROFILE, GAL_PROFILE, BDS_PROFILE, QZS_PROFILE)}


def get_profile(system: int) -> ConstellationProfile:
    """Look up the profile of a system, ValueError for unsupported systems"""
    try:
        return PROFILES[system]
    except KeyError:
        raise ValueError(f"No broadcast ephemeris profile for system 0x{system:02x}") from None
