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

"""Ephemeris storage and selection"""

import bisect
import logging
from enum import Enum
from typing import Iterable, Optional, Union

import pandas as pd

from ..core.constants import *
from ..core.constellation import BDS_PROFILE, ConstellationProfile
from ..core.data_structures import BroadcastRecord
from ..core.exceptions import EphemerisNotFound, WrongConstellation
from ..core.satellite_numbering import sat_to_id
from ..core.time import GNSSTime, to_seconds
from .dump import TERSE_HEADER, dump_body, dump_terse
from .health import HealthGate
from .validity import ValidityCalculator

logger = logging.getLogger(__name__)


class SearchMethod(Enum):
    """Tie-break policy of :meth:`EphemerisStore.find`.

    USER : int
        Among records valid at t, the most recently transmitted one
    NEAREST : int
        Among records valid at t, the one whose toe is closest to t
    """
    USER = 1
    NEAREST = 2


def _order_key(eph: BroadcastRecord):
    return (eph.toe, eph.transmit_time)


def _is_stale(eph: BroadcastRecord) -> bool:
    # transmitted after its own end of validity, window collapsed to end_valid
    return eph.transmit_time > eph.end_valid


class EphemerisStore:
    """
    Store broadcast records of one constellation and select the record
    that applies at a given time.

    Records are kept per satellite, ordered by (toe, transmit_time). Each
    record gets its validity window when added. The store is not internally
    locked: callers serialize add/clear/rationalize, concurrent ``find``
    calls are fine once loading is complete.

    Parameters
    ----------
    profile : ConstellationProfile
        Constellation accepted by the store, defaults to BeiDou
    search_method : SearchMethod
        Selection policy among the records valid at the query time
    name : str, optional
        Label used in logs and dumps

    Attributes
    ----------
    initial_time : float or None
        Earliest begin_valid over all records, None when empty
    final_time : float or None
        Latest end_valid over all records, None when empty

    Examples
    --------
    >>> store = EphemerisStore(BDS_PROFILE)
    >>> store.add(record)
    >>> eph = store.find(sat=prn2sat(6, SYS_BDS), t=t)
    >>> state = OrbitPropagator().propagate(eph, t)
    """

    def __init__(self, profile: ConstellationProfile = BDS_PROFILE,
                 search_method: SearchMethod = SearchMethod.USER,
                 name: Optional[str] = None):
        self.profile = profile
        self.search_method = search_method
        self.name = name if name is not None else f"{profile.name} ephemeris store"
        self.validity = ValidityCalculator(profile)
        self.health = HealthGate(profile)
        self._records = {}  # sat -> list of BroadcastRecord
        self.initial_time = None
        self.final_time = None

    def __len__(self):
        return self.size()

    def __contains__(self, sat) -> bool:
        return sat in self._records

    def __repr__(self):
        return (f"EphemerisStore(name={self.name!r}, satellites={len(self._records)}, "
                f"records={self.size()}, search_method={self.search_method.name})")

    def _check_system(self, sat: int) -> None:
        if sat2sys(sat) != self.profile.system:
            logger.debug("%s: rejected sat %d, not %s", self.name, sat, self.profile.name)
            raise WrongConstellation(sat, self.profile.name)

    def _extend_bounds(self, eph: BroadcastRecord) -> None:
        if self.initial_time is None or eph.begin_valid < self.initial_time:
            self.initial_time = eph.begin_valid
        if self.final_time is None or eph.end_valid > self.final_time:
            self.final_time = eph.end_valid

    def _recompute_bounds(self) -> None:
        self.initial_time = None
        self.final_time = None
        for recs in self._records.values():
            for eph in recs:
                self._extend_bounds(eph)

    def add(self, eph: BroadcastRecord) -> BroadcastRecord:
        """
        Add a broadcast record to the store.

        The validity window is computed here. A record whose content is
        identical to one already stored is not duplicated.

        Parameters
        ----------
        eph : BroadcastRecord
            Record with all required fields

        Returns
        -------
        BroadcastRecord
            The stored record (carrying its validity window), or the
            existing stored copy for a duplicate

        Raises
        ------
        DataNotLoaded
            If the record lacks required fields
        WrongConstellation
            If the satellite is not of the store's constellation
        """
        eph.require_loaded()
        self._check_system(eph.sat)

        stored = self.validity.apply(eph)
        recs = self._records.setdefault(eph.sat, [])
        key = _order_key(stored)

        idx = bisect.bisect_left([_order_key(r) for r in recs], key)
        for existing in recs[idx:]:
            if _order_key(existing) != key:
                break
            if existing.same_data(stored):
                logger.debug("%s: duplicate record for %s toe=%.1f ignored",
                             self.name, stored.sat_id, stored.toe)
                return existing

        # insert after any equal keys so arrival order is kept among ties
        idx = bisect.bisect_right([_order_key(r) for r in recs], key)
        recs.insert(idx, stored)
        self._extend_bounds(stored)
        logger.debug("%s: added %s toe=%.1f window=[%.1f, %.1f]",
                     self.name, stored.sat_id, stored.toe, stored.begin_valid, stored.end_valid)
        return stored

    def add_all(self, records: Iterable[BroadcastRecord]) -> int:
        """Add many records, returning the number of records actually stored"""
        before = self.size()
        for eph in records:
            self.add(eph)
        return self.size() - before

    def find(self, sat: int, t: Union[float, GNSSTime], healthy_only: bool = False) -> BroadcastRecord:
        """
        Find the record that applies to a satellite at time t.

        Parameters
        ----------
        sat : int
            Satellite number
        t : float or GNSSTime
            Time of interest in the constellation's time system
        healthy_only : bool
            Skip records whose health code is not the healthy one

        Returns
        -------
        BroadcastRecord
            A record whose validity window contains t (edges inclusive).
            Records transmitted after their own end of validity never match

        Raises
        ------
        WrongConstellation
            If the satellite is not of the store's constellation
        EphemerisNotFound
            If no stored window contains t
        """
        self._check_system(sat)
        time = to_seconds(t, self.profile.time_sys)

        candidates = [eph for eph in self._records.get(sat, ())
                      if eph.begin_valid <= time <= eph.end_valid and not _is_stale(eph)]
        if healthy_only:
            candidates = [eph for eph in candidates if self.health.is_healthy(eph)]

        if not candidates:
            logger.debug("%s: no record for sat %d at t=%.3f", self.name, sat, time)
            raise EphemerisNotFound(sat, time)

        if self.search_method == SearchMethod.NEAREST:
            return min(candidates, key=lambda eph: (abs(time - eph.toe), -eph.transmit_time))
        return max(candidates, key=lambda eph: (eph.transmit_time, eph.toe))

    def rationalize(self) -> int:
        """
        Clean up the stored records.

        Per satellite, a copy of an issue (same toe, IODE and IODC) whose
        content repeats the previously kept copy apart from its transmit time
        is redundant and removed, so the earliest transmission of each content
        stays. Copies that change content under the same issue, such as a
        new health code, are kept. Stale records whose transmit time lies
        after their own end of validity are dropped. Running it twice removes
        nothing the second time.

        Returns
        -------
        int
            Number of records removed
        """
        removed = 0
        for sat in list(self._records.keys()):
            latest = {}  # issue -> last kept copy
            recs = []
            for eph in sorted(self._records[sat], key=lambda r: (r.transmit_time, r.toe)):
                if _is_stale(eph):
                    logger.warning("%s: dropped stale %s toe=%.1f transmitted at %.1f",
                                   self.name, eph.sat_id, eph.toe, eph.transmit_time)
                    continue
                issue = (eph.toe, eph.iode, eph.iodc)
                previous = latest.get(issue)
                if previous is not None and previous.same_data(eph, ignore=('transmit_time',)):
                    continue
                latest[issue] = eph
                recs.append(eph)

            recs.sort(key=_order_key)
            removed += len(self._records[sat]) - len(recs)
            if recs:
                self._records[sat] = recs
            else:
                del self._records[sat]

        if removed:
            self._recompute_bounds()
            logger.info("%s: rationalize removed %d records", self.name, removed)
        return removed

    def clear(self) -> None:
        """Remove every record and reset the time bounds"""
        self._records = {}
        self.initial_time = None
        self.final_time = None

    def drop_satellite(self, sat: int) -> int:
        """Remove all records of one satellite, returning how many were removed"""
        recs = self._records.pop(sat, [])
        if recs:
            self._recompute_bounds()
        return len(recs)

    def edit(self, tmin: float, tmax: float) -> int:
        """
        Remove records whose validity window lies wholly outside [tmin, tmax].

        Returns
        -------
        int
            Number of records removed
        """
        tmin = to_seconds(tmin, self.profile.time_sys)
        tmax = to_seconds(tmax, self.profile.time_sys)
        removed = 0
        for sat in list(self._records.keys()):
            recs = [eph for eph in self._records[sat]
                    if eph.end_valid >= tmin and eph.begin_valid <= tmax]
            removed += len(self._records[sat]) - len(recs)
            if recs:
                self._records[sat] = recs
            else:
                del self._records[sat]
        if removed:
            self._recompute_bounds()
        return removed

    def add_to_list(self, sat: int = 0) -> list:
        """
        Snapshot of stored records for external iteration.

        Parameters
        ----------
        sat : int
            Satellite filter, 0 for all satellites

        Returns
        -------
        list[BroadcastRecord]
            New list, ordered by satellite then (toe, transmit_time)
        """
        if sat:
            return list(self._records.get(sat, ()))
        return [eph for s in sorted(self._records) for eph in self._records[s]]

    def to_dataframe(self, sat: int = 0) -> pd.DataFrame:
        """Tabular snapshot of stored records for reporting"""
        rows = [{
            'sat': eph.sat,
            'sat_id': eph.sat_id,
            'toe': eph.toe,
            'toc': eph.toc,
            'transmit_time': eph.transmit_time,
            'begin_valid': eph.begin_valid,
            'end_valid': eph.end_valid,
            'iode': eph.iode,
            'iodc': eph.iodc,
            'svh': eph.svh,
            'ura': self.health.accuracy(eph),
        } for eph in self.add_to_list(sat)]
        columns = ['sat', 'sat_id', 'toe', 'toc', 'transmit_time', 'begin_valid',
                   'end_valid', 'iode', 'iodc', 'svh', 'ura']
        return pd.DataFrame(rows, columns=columns)

    def satellites(self) -> list:
        """Sorted satellite numbers with at least one record"""
        return sorted(self._records)

    def records(self, sat: int) -> tuple:
        return tuple(self._records.get(sat, ()))

    def size(self) -> int:
        """Total number of stored records"""
        return sum(len(recs) for recs in self._records.values())

    def dump(self, detail: int = 0) -> str:
        """
        Text description of the store.

        Parameters
        ----------
        detail : int
            0 summary, 1 one row per record, 2 full record bodies
        """
        ts = self.profile.time_sys
        lines = [f"Dump of {self.name}",
                 f"  {len(self._records)} satellites, {self.size()} records, "
                 f"search method {self.search_method.name}"]
        if self.initial_time is not None:
            lines.append(f"  Span is {GNSSTime.from_seconds(self.initial_time, ts)}"
                         f" to {GNSSTime.from_seconds(self.final_time, ts)}")

        if detail <= 0:
            for sat in self.satellites():
                lines.append(f"  {sat_to_id(sat)}: {len(self._records[sat])} records")
        elif detail == 1:
            lines.append(TERSE_HEADER)
            lines.extend(dump_terse(eph) for eph in self.add_to_list())
        else:
            lines.extend(dump_body(eph) for eph in self.add_to_list())
        lines.append(f"End of dump of {self.name}")
        return "\n".join(lines)
