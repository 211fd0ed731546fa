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

"""Validity windows of broadcast records"""

import logging

from ..core.constellation import ConstellationProfile
from ..core.data_structures import BroadcastRecord
from ..core.exceptions import DataNotLoaded

logger = logging.getLogger(__name__)


class ValidityCalculator:
    """
    Derive the time window during which a broadcast record is authoritative.

    The window is a heuristic, not a protocol guarantee:

    - ``begin_valid = max(toe, transmit_time)``: data is not used before it
      is transmitted, and an upload in the middle of the hour starts at its
      own transmit time.
    - ``end_valid = toe + fixed_duration`` when the constellation declares a
      fixed lifetime. BeiDou does: its ICD mentions a fit interval without
      defining one, so records are used for one hour from Toe.
    - otherwise ``end_valid = toe + fit * 3600 / 2`` using the record's fit
      interval (hours), or the profile default when the record has none.

    Parameters
    ----------
    profile : ConstellationProfile
        Constellation whose policy applies

    Examples
    --------
    >>> calc = ValidityCalculator(BDS_PROFILE)
    >>> begin, end = calc.compute(eph)
    >>> stored = calc.apply(eph)
    """

    def __init__(self, profile: ConstellationProfile):
        self.profile = profile

    def duration(self, eph: BroadcastRecord) -> float:
        """Lifetime of a record after its Toe (s)"""
        if self.profile.fixed_duration is not None:
            return self.profile.fixed_duration
        fit = eph.fit if eph.fit and eph.fit > 0 else self.profile.default_fit_hours
        return fit * 3600.0 / 2.0

    def compute(self, eph: BroadcastRecord) -> tuple[float, float]:
        """
        Compute the validity window of a record.

        Returns
        -------
        tuple[float, float]
            (begin_valid, end_valid), with toe <= begin_valid <= end_valid

        Raises
        ------
        DataNotLoaded
            If toe is unset
        """
        if eph.toe is None:
            raise DataNotLoaded(missing=('toe',))

        begin_valid = eph.toe
        if eph.transmit_time is not None and eph.transmit_time > begin_valid:
            begin_valid = eph.transmit_time
        end_valid = eph.toe + self.duration(eph)

        if begin_valid > end_valid:
            logger.warning("%s: transmit time %.1f after end of validity %.1f, window collapsed",
                           eph.sat_id, begin_valid, end_valid)
            begin_valid = end_valid

        return begin_valid, end_valid

    def apply(self, eph: BroadcastRecord) -> BroadcastRecord:
        """Return a copy of the record carrying its validity window"""
        begin_valid, end_valid = self.compute(eph)
        return eph.with_validity(begin_valid, end_valid)


def is_valid(eph: BroadcastRecord, t: float) -> bool:
    """
    Check whether t falls in the record's validity window (inclusive).

    Raises
    ------
    DataNotLoaded
        If the record carries no validity window
    """
    if not eph.has_validity:
        raise DataNotLoaded(missing=('begin_valid', 'end_valid'))
    return eph.begin_valid <= t <= eph.end_valid
