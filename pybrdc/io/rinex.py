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

"""RINEX navigation input through cssrlib"""

from __future__ import annotations

import logging

from cssrlib.gnss import Eph, Nav, sat2prn, sys2char, time2gpst
from cssrlib.rinex import rnxdec

from ..core.constants import WEEK_SECONDS
from ..core.constellation import get_profile
from ..core.data_structures import BroadcastRecord
from ..core.satellite_numbering import SYS_TO_CHAR, prn_to_sat, sat_to_sys
from ..core.time import gpst_to_system

logger = logging.getLogger(__name__)

# cssrlib numbers QZSS by PRN 193-202
_QZS_PRN_BASE = 192


def read_nav(filename: str) -> Nav:
    """Decode a RINEX navigation file into a cssrlib Nav object."""

    nav = Nav()
    decoder = rnxdec()
    decoder.decode_nav(filename, nav, append=False)
    return nav


def _gps_seconds(gtime) -> float:
    week, tow = time2gpst(gtime)
    return week * WEEK_SECONDS + tow


def _has_time(gtime) -> bool:
    return gtime is not None and getattr(gtime, 'time', 0) != 0


def record_from_eph(eph: Eph) -> BroadcastRecord:
    """
    Convert a cssrlib ephemeris into a BroadcastRecord.

    cssrlib keeps every time as an absolute ``gtime_t`` on the GPS scale
    (BeiDou times are shifted to GPST by the RINEX decoder). Times are
    converted to continuous seconds of the satellite's own time system.

    Parameters
    ----------
    eph : cssrlib.gnss.Eph
        Decoded Keplerian ephemeris

    Returns
    -------
    BroadcastRecord
        Record without validity window

    Raises
    ------
    ValueError
        If the satellite is not of a Keplerian broadcast constellation
    """
    sys, prn = sat2prn(eph.sat)
    sys_char = sys2char(sys)
    if sys_char == 'J' and prn > _QZS_PRN_BASE:
        prn -= _QZS_PRN_BASE
    sat = prn_to_sat(sys_char, prn)
    time_sys = get_profile(sat_to_sys(sat)).time_sys

    toe = gpst_to_system(_gps_seconds(eph.toe), time_sys)
    toc = gpst_to_system(_gps_seconds(eph.toc), time_sys) if _has_time(eph.toc) else toe
    tot = getattr(eph, 'tot', None)
    transmit_time = gpst_to_system(_gps_seconds(tot), time_sys) if _has_time(tot) else toe

    return BroadcastRecord(
        sat=sat,
        transmit_time=transmit_time,
        toe=toe,
        toc=toc,
        iodc=int(eph.iodc),
        iode=int(eph.iode),
        week=int(toe // WEEK_SECONDS),
        A=float(eph.A),
        Adot=float(getattr(eph, 'Adot', 0.0)),
        e=float(eph.e),
        i0=float(eph.i0),
        idot=float(eph.idot),
        OMG0=float(eph.OMG0),
        OMGd=float(eph.OMGd),
        omg=float(eph.omg),
        M0=float(eph.M0),
        deln=float(eph.deln),
        delnd=float(getattr(eph, 'delnd', 0.0)),
        cuc=float(eph.cuc),
        cus=float(eph.cus),
        crc=float(eph.crc),
        crs=float(eph.crs),
        cic=float(eph.cic),
        cis=float(eph.cis),
        f0=float(eph.af0),
        f1=float(eph.af1),
        f2=float(eph.af2),
        tgd=(float(getattr(eph, 'tgd', 0.0)), float(getattr(eph, 'tgd_b', 0.0))),
        svh=int(eph.svh),
        sva=int(eph.sva),
        fit=float(getattr(eph, 'fit', 0.0)),
    )


def load_nav(filename: str, store) -> int:
    """
    Add every ephemeris of the store's constellation from a navigation file.

    Parameters
    ----------
    filename : str
        RINEX navigation file
    store : EphemerisStore
        Destination store

    Returns
    -------
    int
        Number of records stored
    """
    sys_char = SYS_TO_CHAR[store.profile.system]
    nav = read_nav(filename)
    records = [record_from_eph(eph) for eph in nav.eph
               if sys2char(sat2prn(eph.sat)[0]) == sys_char]

    added = store.add_all(records)
    logger.info("Loaded %d %s records from %s", added, store.profile.name, filename)
    return added
