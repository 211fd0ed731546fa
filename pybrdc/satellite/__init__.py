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


"""
Satellite computation module for broadcast ephemerides.

This module stores broadcast navigation records, selects the record that
applies at a given time, and propagates it to satellite position, velocity
and clock. GPS, Galileo, QZSS and BeiDou share the Keplerian model; BeiDou
GEO satellites use an additional frame rotation.

Modules
-------
ephemeris : module
    EphemerisStore with its search policies and maintenance operations
validity : module
    Validity window of a broadcast record
kepler : module
    Compiled solver for Kepler's equation
satellite_position : module
    OrbitPropagator, position and velocity from broadcast ephemeris
clock : module
    Clock polynomial, relativity correction and group delays
health : module
    Health code and URA interpretation
dump : module
    Human-readable record descriptions

Usage Examples
--------------
Store and select:

    >>> from pybrdc.satellite import EphemerisStore
    >>> store = EphemerisStore(BDS_PROFILE)
    >>> store.add(record)
    >>> eph = store.find(sat, t)

Propagate:

    >>> from pybrdc.satellite import OrbitPropagator
    >>> state = OrbitPropagator().propagate(eph, t)
    >>> print(state.pos, state.clock_correction)

Standards Compliance
-------------------
- GPS Interface Specification IS-GPS-200
- Galileo Open Service Signal In Space ICD
- BeiDou Navigation Satellite System Signal In Space ICD

Notes
-----
Time systems: every time is continuous seconds in the record's own time
system (BDT for BeiDou, GST for Galileo, GPST for GPS and QZSS).
"""

from .clock import clock_bias, clock_drift, group_delay, relativity
from .dump import TERSE_HEADER, dump_body, dump_terse
from .ephemeris import EphemerisStore, SearchMethod
from .health import HealthGate, ura_value
from .kepler import solve_kepler
from .satellite_position import (OrbitPropagator, PropagatorConfig,
                                 logging_trace, orbit_model, propagate)
from .validity import ValidityCalculator, is_valid

__all__ = [
    'EphemerisStore', 'SearchMethod',
    'OrbitPropagator', 'PropagatorConfig', 'propagate', 'orbit_model',
    'logging_trace', 'solve_kepler',
    'ValidityCalculator', 'is_valid',
    'HealthGate', 'ura_value',
    'clock_bias', 'clock_drift', 'relativity', 'group_delay',
    'TERSE_HEADER', 'dump_terse', 'dump_body',
]
