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


"""Unified satellite numbering system for pybrdc.

Broadcast records and store queries identify a satellite by a single internal
satellite number. This module converts between that number and the
constellation-specific PRN so that records from different systems never
collide inside one map.

The satellite number blocks are:
- GPS (G): 1-32
- SBAS (S): 33-64 (PRN 120-151), 133-140 (PRN 152-159)
- GLONASS (R): 65-88
- Galileo (E): 97-132
- BeiDou (C): 141-203
- QZSS (J): 210-216
- IRNSS (I): 230-243
"""

from typing import NamedTuple

from .constants import (SYS_BDS, SYS_GAL, SYS_GLO, SYS_GPS, SYS_IRN, SYS_NONE,
                        SYS_QZS, SYS_SBS)


class NumberBlock(NamedTuple):
    """Contiguous run of satellite numbers mapped onto contiguous PRNs"""
    system: int
    first_sat: int
    first_prn: int
    count: int

    def contains_sat(self, sat: int) -> bool:
        return self.first_sat <= sat < self.first_sat + self.count

    def contains_prn(self, prn: int) -> bool:
        return self.first_prn <= prn < self.first_prn + self.count


NUMBER_BLOCKS = (
    NumberBlock(SYS_GPS, 1, 1, 32),
    NumberBlock(SYS_SBS, 33, 120, 32),
    NumberBlock(SYS_GLO, 65, 1, 24),
    NumberBlock(SYS_GAL, 97, 1, 36),
    NumberBlock(SYS_SBS, 133, 152, 8),
    NumberBlock(SYS_BDS, 141, 1, 63),
    NumberBlock(SYS_QZS, 210, 1, 7),
    NumberBlock(SYS_IRN, 230, 1, 14),
)

SYS_TO_CHAR = {
    SYS_GPS: 'G',
    SYS_GLO: 'R',
    SYS_GAL: 'E',
    SYS_BDS: 'C',
    SYS_QZS: 'J',
    SYS_SBS: 'S',
    SYS_IRN: 'I',
}

CHAR_TO_SYS = {v: k for k, v in SYS_TO_CHAR.items()}

# BeiDou geostationary PRNs (BDS-2 C01-C05, BDS-3 C59-C63)
BDS_GEO_PRNS = frozenset(list(range(1, 6)) + list(range(59, 64)))


def _block_of(sat):
    for block in NUMBER_BLOCKS:
        if block.contains_sat(sat):
            return block
    return None


def prn_to_sat(system_char, prn):
    """Convert system character and PRN to internal satellite number.

    Parameters
    ----------
    system_char : str
        Single character system identifier ('G', 'R', 'E', 'C', 'J', 'S', 'I')
    prn : int
        PRN number within the constellation

    Returns
    -------
    int
        Internal satellite number, or 0 if invalid PRN or system

    Examples
    --------
    >>> prn_to_sat('C', 3)
    143
    >>> prn_to_sat('X', 1)
    0
    """
    system = CHAR_TO_SYS.get(system_char)
    for block in NUMBER_BLOCKS:
        if block.system == system and block.contains_prn(prn):
            return block.first_sat + prn - block.first_prn
    return 0


def sat_to_prn(sat):
    """Convert internal satellite number to constellation-specific PRN, 0 if unknown."""
    block = _block_of(sat)
    return block.first_prn + sat - block.first_sat if block else 0


def sat_to_sys(sat):
    """Return the system ID owning an internal satellite number."""
    block = _block_of(sat)
    return block.system if block else SYS_NONE


def sat_to_id(sat):
    """Format an internal satellite number as a RINEX-style id ('C01', 'G12')."""
    block = _block_of(sat)
    if block is None:
        return f"???{sat}"
    prn = block.first_prn + sat - block.first_sat
    if block.system == SYS_SBS:
        prn -= 100
    return f"{SYS_TO_CHAR[block.system]}{prn:02d}"


def is_beidou_geo(sat):
    """
    Check whether a satellite is a BeiDou geostationary satellite.

    GEO: C01-C05 (BDS-2) and C59-C63 (BDS-3). IGSO and MEO satellites use
    the standard Keplerian frame rotation.
    """
    return sat_to_sys(sat) == SYS_BDS and sat_to_prn(sat) in BDS_GEO_PRNS
