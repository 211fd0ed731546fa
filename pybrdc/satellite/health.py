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

"""Satellite health and accuracy interpretation"""

from ..core.constellation import ConstellationProfile
from ..core.data_structures import BroadcastRecord


def ura_value(sva: int) -> float:
    """
    Convert User Range Accuracy (URA) index to actual accuracy value in meters.

    Parameters
    ----------
    sva : int
        URA index (0-15) from the broadcast record

    Returns
    -------
    float
        URA accuracy value in meters

    Notes
    -----
    URA index mapping (GPS and BeiDou share the table):
    - 0: 2.4 m     - 8: 96.0 m
    - 1: 3.4 m     - 9: 192.0 m
    - 2: 4.85 m    - 10: 384.0 m
    - 3: 6.85 m    - 11: 768.0 m
    - 4: 9.65 m    - 12: 1536.0 m
    - 5: 13.65 m   - 13: 3072.0 m
    - 6: 24.0 m    - 14: 6144.0 m
    - 7: 48.0 m    - 15: No accuracy prediction

    Values outside the 0-15 range return 0.0 meters.

    Examples
    --------
    >>> ura_value(2)
    4.85
    """
    ura_eph = [
        2.4, 3.4, 4.85, 6.85, 9.65, 13.65, 24.0, 48.0,
        96.0, 192.0, 384.0, 768.0, 1536.0, 3072.0, 6144.0, 0.0
    ]
    return ura_eph[sva] if 0 <= sva <= 15 else 0.0


class HealthGate:
    """
    Interpret the health code of broadcast records of one constellation.

    Parameters
    ----------
    profile : ConstellationProfile
        Constellation whose healthy code applies (0 for BeiDou, GPS, Galileo)
    """

    def __init__(self, profile: ConstellationProfile):
        self.profile = profile

    def is_healthy(self, eph: BroadcastRecord) -> bool:
        """
        Check whether the record declares its satellite healthy.

        Raises
        ------
        DataNotLoaded
            If the record lacks required fields
        """
        eph.require_loaded()
        return eph.svh == self.profile.healthy_code

    def accuracy(self, eph: BroadcastRecord) -> float:
        """User range accuracy (m) of the record"""
        eph.require_loaded()
        return ura_value(eph.sva)
