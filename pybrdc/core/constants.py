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

"""GNSS Constants and System Parameters"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies (used for TGD scaling)
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)

# GNSS System IDs
SYS_NONE = 0x00   # invalid
SYS_GPS = 0x01    # GPS
SYS_GLO = 0x02    # GLONASS
SYS_GAL = 0x04    # Galileo
SYS_BDS = 0x08    # BeiDou
SYS_QZS = 0x10    # QZSS
SYS_SBS = 0x20    # SBAS
SYS_IRN = 0x40    # IRNSS

# Time System Parameters
GPST0 = [1980, 1, 6, 0, 0, 0]  # GPS time reference epoch
GST0 = [1999, 8, 22, 0, 0, 0]  # Galileo time reference epoch
BDT0 = [2006, 1, 1, 0, 0, 0]   # BeiDou time reference epoch

WEEK_SECONDS = 604800.0        # seconds per week
GPS_BDS_OFFSET = 14.0          # GPS-BeiDou time offset (seconds)
BDT0_GPS_WEEK = 1356           # GPS week containing the BDT epoch

# Earth Parameters (WGS84)
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)

# System-specific gravitational constants
MU_GPS = 3.9860050E14          # GPS gravitational constant
MU_GAL = 3.986004418E14        # Galileo gravitational constant
MU_BDS = 3.986004418E14        # BeiDou gravitational constant (CGCS2000)

# System-specific earth angular velocities
OMGE_GPS = OMGE                # GPS earth angular velocity
OMGE_GAL = 7.2921151467E-5     # Galileo earth angular velocity
OMGE_BDS = 7.292115E-5         # BeiDou earth angular velocity (CGCS2000)

# Unit conversions
D2R = np.pi / 180.0            # degrees to radians

# Kepler solver defaults
KEPLER_MAX_ITER = 20           # iteration cap
KEPLER_TOL = 1.0E-11           # convergence threshold on |dE| (rad)

# Nominal BeiDou GEO frame tilt (deg), modeling constant
BDS_GEO_TILT_DEG = -5.0

# Validity heuristics
BDS_VALIDITY_DURATION = 3600.0  # BeiDou record lifetime after Toe (s)
DEFAULT_FIT_HOURS = 4.0         # fit interval when the record carries none (h)


# Satellite number helpers; satellite_numbering imports the system IDs above,
# so it is imported lazily

def sat2sys(sat):
    """Get satellite system from satellite number"""
    from .satellite_numbering import sat_to_sys
    return sat_to_sys(sat)


def sat2prn(sat):
    """Get PRN number from satellite number"""
    from .satellite_numbering import sat_to_prn
    return sat_to_prn(sat)


def prn2sat(prn, sys):
    """Get satellite number from PRN and system ID, 0 when invalid"""
    from .satellite_numbering import SYS_TO_CHAR, prn_to_sat
    sys_char = SYS_TO_CHAR.get(sys)
    return prn_to_sat(sys_char, prn) if sys_char else 0
