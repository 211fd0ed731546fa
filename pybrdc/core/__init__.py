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

"""Core Broadcast Ephemeris Module.

This module provides the foundation shared by the satellite package:

- **Constants and Parameters**: system IDs, gravitational constants, Earth
  rotation rates, Kepler solver defaults and validity heuristics
- **Constellation Profiles**: per-system constants and policies
- **Data Structures**: ``BroadcastRecord`` (immutable broadcast message with
  its validity window) and ``OrbitState`` (propagation output)
- **Time Systems**: continuous system seconds and the week/TOW ``GNSSTime`` view
- **Satellite Numbering**: unified internal satellite numbers
- **Exceptions**: the error kinds raised by stores and propagators

Example Usage:
    >>> from pybrdc.core import *
    >>>
    >>> sat = prn2sat(3, SYS_BDS)
    >>> rec = BroadcastRecord(sat=sat, toe=432000.0, transmit_time=431700.0, ...)
    >>> rec.data_loaded
    True
"""

from .constants import *
from .constellation import *
from .data_structures import *
from .exceptions import *
from .satellite_numbering import is_beidou_geo, sat_to_id
from .time import *
