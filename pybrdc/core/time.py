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

"""GNSS Time Systems and Conversions

Records and queries carry time as continuous seconds since the epoch of the
constellation's own time system (``week * 604800 + tow``). ``GNSSTime`` is the
week/TOW view of the same instant and is accepted wherever a float is.
"""

from datetime import datetime, timedelta
from typing import Union

from .constants import (BDT0, BDT0_GPS_WEEK, GPS_BDS_OFFSET, GPST0, GST0,
                        WEEK_SECONDS)

TIME_SYSTEMS = ('GPS', 'GAL', 'BDS', 'QZS')

_EPOCHS = {
    'GPS': GPST0,
    'GAL': GST0,
    'BDS': BDT0,
    'QZS': GPST0,
}


class GNSSTime:
    """GNSS Time representation and conversion with type safety

    This class ensures that time systems are not accidentally mixed.
    All arithmetic operations check for compatible time systems.
    """

    def __init__(self, week: int = 0, tow: float = 0.0, time_sys: str = 'GPS'):
        """
        Initialize GNSS time

        Parameters:
        -----------
        week : int
            Week number
        tow : float
            Time of week in seconds
        time_sys : str
            Time system ('GPS', 'GAL', 'BDS', 'QZS')
        """
        self.week = int(week)
        self.tow = float(tow)
        self.time_sys = time_sys.upper()

        if self.time_sys not in TIME_SYSTEMS:
            raise ValueError(f"Invalid time system: {time_sys}. Must be one of {list(TIME_SYSTEMS)}")

        # Normalize TOW to [0, 604800)
        while self.tow >= WEEK_SECONDS:
            self.week += 1
            self.tow -= WEEK_SECONDS
        while self.tow < 0:
            self.week -= 1
            self.tow += WEEK_SECONDS

    @classmethod
    def from_datetime(cls, dt, time_sys='GPS'):
        """Create GNSSTime from datetime object"""
        time_sys = time_sys.upper()
        if time_sys not in _EPOCHS:
            raise ValueError(f"Unknown time system: {time_sys}")

        delta = dt - datetime(*_EPOCHS[time_sys])
        weeks = delta.days // 7
        tow = (delta.days % 7) * 86400 + delta.seconds + delta.microseconds * 1e-6

        return cls(weeks, tow, time_sys)

    @classmethod
    def from_seconds(cls, seconds, time_sys='GPS'):
        """Create GNSSTime from continuous seconds since the system epoch"""
        week = int(seconds // WEEK_SECONDS)
        tow = seconds - week * WEEK_SECONDS
        return cls(week, tow, time_sys)

    def to_datetime(self):
        """Convert to datetime object"""
        return datetime(*_EPOCHS[self.time_sys]) + timedelta(weeks=self.week, seconds=self.tow)

    def to_seconds(self):
        """Convert to continuous seconds since the system epoch"""
        return self.week * WEEK_SECONDS + self.tow

    def __add__(self, seconds: float) -> 'GNSSTime':
        """Add seconds using + operator"""
        if isinstance(seconds, (int, float)):
            return GNSSTime.from_seconds(self.to_seconds() + seconds, self.time_sys)
        raise TypeError(f"Cannot add {type(seconds)} to GNSSTime")

    def __sub__(self, other: Union['GNSSTime', float]) -> Union[float, 'GNSSTime']:
        """Subtract time or seconds"""
        if isinstance(other, GNSSTime):
            self._check_system(other)
            return (self.week - other.week) * WEEK_SECONDS + (self.tow - other.tow)
        elif isinstance(other, (int, float)):
            return self + (-other)
        raise TypeError(f"Cannot subtract {type(other)} from GNSSTime")

    def _check_system(self, other):
        if self.time_sys != other.time_sys:
            raise ValueError(f"Cannot compare times with different systems: {self.time_sys} and {other.time_sys}")

    def __lt__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other)
        return (self.week, self.tow) < (other.week, other.tow)

    def __le__(self, other: 'GNSSTime') -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        self._check_system(other)
        return (self.week, self.tow) <= (other.week, other.tow)

    def __eq__(self, other) -> bool:
        if not isinstance(other, GNSSTime):
            return NotImplemented
        return self.time_sys == other.time_sys and self.week == other.week and abs(self.tow - other.tow) < 1e-9

    def __hash__(self):
        return hash((self.time_sys, self.week, round(self.tow, 6)))

    def __str__(self):
        return f"{self.time_sys} Week: {self.week}, TOW: {self.tow:.3f}"

    def __repr__(self):
        return f"GNSSTime({self.week}, {self.tow}, '{self.time_sys}')"


def to_seconds(t: Union[GNSSTime, float], time_sys: str) -> float:
    """
    Normalize a query time to continuous seconds in ``time_sys``.

    Floats are taken to already be in ``time_sys``. A GNSSTime in a different
    system raises ValueError rather than being silently shifted.
    """
    if isinstance(t, GNSSTime):
        if t.time_sys != time_sys.upper():
            raise ValueError(f"Time system mismatch: got {t.time_sys}, expected {time_sys}")
        return t.to_seconds()
    return float(t)


def time_of_week(seconds: float) -> float:
    """Time of week of continuous system seconds"""
    return seconds % WEEK_SECONDS


def gpst_to_bdt(gps_seconds: float) -> float:
    """Convert continuous GPS seconds to continuous BDT seconds"""
    return gps_seconds - BDT0_GPS_WEEK * WEEK_SECONDS - GPS_BDS_OFFSET


def bdt_to_gpst(bdt_seconds: float) -> float:
    """Convert continuous BDT seconds to continuous GPS seconds"""
    return bdt_seconds + BDT0_GPS_WEEK * WEEK_SECONDS + GPS_BDS_OFFSET


def gpst_to_system(gps_seconds: float, time_sys: str) -> float:
    """
    Convert continuous GPS seconds to continuous seconds of another system.

    GST and QZSST run aligned with GPST and differ only by their epochs;
    BDT additionally lags GPST by 14 s.
    """
    time_sys = time_sys.upper()
    if time_sys == 'BDS':
        return gpst_to_bdt(gps_seconds)
    if time_sys not in _EPOCHS:
        raise ValueError(f"Unknown time system: {time_sys}")
    epoch_shift = (datetime(*_EPOCHS[time_sys]) - datetime(*GPST0)).total_seconds()
    return gps_seconds - epoch_shift


def format_time(seconds: float, time_sys: str, fmt: str = "%j %H:%M:%S") -> str:
    """Format continuous system seconds with a strftime pattern"""
    return GNSSTime.from_seconds(seconds, time_sys).to_datetime().strftime(fmt)
