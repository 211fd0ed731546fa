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

"""Human-readable diagnostic text for broadcast records"""

from ..core.constants import CLIGHT
from ..core.constellation import get_profile
from ..core.data_structures import BroadcastRecord
from ..core.time import GNSSTime, format_time
from .health import ura_value

TERSE_TIME_FORMAT = "%j %H:%M:%S"

TERSE_HEADER = (" Sat ! Transmit     ! Toe          ! End valid    !"
                " URA  !IODC!IODE!Health!")


def _time_display(seconds, time_sys):
    if seconds is None:
        return "--- --:--:--"
    return format_time(seconds, time_sys, TERSE_TIME_FORMAT)


def _week_sow(seconds, time_sys):
    t = GNSSTime.from_seconds(seconds, time_sys)
    return f"{t.week:4d} {t.tow:10.3f}"


def dump_terse(eph: BroadcastRecord) -> str:
    """
    One table row: satellite, transmit/epoch/valid-end times, accuracy,
    IODC, IODE and health.
    """
    eph.require_loaded()
    ts = get_profile(eph.system).time_sys
    return (f" {eph.sat_id:>3s} ! "
            f"{_time_display(eph.transmit_time, ts)} ! "
            f"{_time_display(eph.toe, ts)} ! "
            f"{_time_display(eph.end_valid, ts)} !"
            f"{ura_value(eph.sva):6.2f}!"
            f"{eph.iodc:4d}!"
            f"{eph.iode:4d}!"
            f"{eph.svh:6d}!")


def dump_body(eph: BroadcastRecord) -> str:
    """Full multi-line description of a record"""
    eph.require_loaded()
    profile = get_profile(eph.system)
    ts = profile.time_sys

    lines = [
        "****************************************************************",
        f"Broadcast ephemeris for {eph.sat_id} ({profile.name}, {ts} time)",
        "           Week  SOW          DOY HH:MM:SS",
        f"Transmit : {_week_sow(eph.transmit_time, ts)}   {_time_display(eph.transmit_time, ts)}",
        f"Toe      : {_week_sow(eph.toe, ts)}   {_time_display(eph.toe, ts)}",
        f"Toc      : {_week_sow(eph.toc, ts)}   {_time_display(eph.toc, ts)}",
        f"Begin    : {_time_display(eph.begin_valid, ts)}",
        f"End      : {_time_display(eph.end_valid, ts)}",
        "",
        "           CLOCK PARAMETERS",
        f"Bias T0     : {eph.f0: .8e} sec = {eph.f0 * CLIGHT: .8e} meters",
        f"Drift       : {eph.f1: .8e} sec/sec",
        f"Drift rate  : {eph.f2: .8e} sec/(sec**2)",
        "",
        "           ORBIT PARAMETERS",
        f"Semi-major axis       : {eph.A: .8e} m     {eph.Adot: .8e} m/sec",
        f"Motion correction     : {eph.deln: .8e} rad/sec {eph.delnd: .8e} rad/(sec**2)",
        f"Eccentricity          : {eph.e: .8e}",
        f"Arg of perigee        : {eph.omg: .8e} rad",
        f"Mean anomaly at epoch : {eph.M0: .8e} rad",
        f"Right ascension       : {eph.OMG0: .8e} rad   {eph.OMGd: .8e} rad/sec",
        f"Inclination           : {eph.i0: .8e} rad   {eph.idot: .8e} rad/sec",
        "",
        "           HARMONIC CORRECTIONS",
        f"Radial        Sine: {eph.crs: .8e} m    Cosine: {eph.crc: .8e} m",
        f"Inclination   Sine: {eph.cis: .8e} rad  Cosine: {eph.cic: .8e} rad",
        f"In-track      Sine: {eph.cus: .8e} rad  Cosine: {eph.cuc: .8e} rad",
        "",
        f"           {profile.name}-SPECIFIC PARAMETERS",
    ]
    for k, tgd in enumerate(eph.tgd):
        lines.append(f"Tgd[{k}]      : {tgd * CLIGHT:16.8e} meters")
    fit_text = f"{eph.fit:2.0f} hours" if eph.fit else " - (not broadcast)"
    lines += [
        f"fitDuration : {fit_text}",
        f"Accuracy    : {ura_value(eph.sva):.2f} meters",
        f"IODC: {eph.iodc}   IODE: {eph.iode}   health: {eph.svh}",
    ]
    return "\n".join(lines)
