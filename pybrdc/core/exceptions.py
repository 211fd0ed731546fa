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

"""Exceptions raised by ephemeris storage and orbit propagation.

None of these are fatal: a store stays usable after any failed query, and the
caller decides whether to fall back to another record or source.
"""


class EphemerisError(Exception):
    """Base class for all pybrdc errors."""


class DataNotLoaded(EphemerisError):
    """A record was queried before its required fields were populated."""

    def __init__(self, message="Data not loaded", missing=()):
        self.missing = tuple(missing)
        if self.missing:
            message = f"{message}: missing {', '.join(self.missing)}"
        super().__init__(message)


class InvalidRequest(EphemerisError):
    """The request cannot be answered by this store."""


class WrongConstellation(InvalidRequest):
    """The satellite does not belong to the store's satellite system."""

    def __init__(self, sat, expected):
        self.sat = sat
        self.expected = expected
        super().__init__(f"Invalid satellite system: sat {sat} is not {expected}")


class EphemerisNotFound(InvalidRequest):
    """No record's validity window covers the query time."""

    def __init__(self, sat, time):
        self.sat = sat
        self.time = time
        super().__init__(f"Ephemeris not found for sat {sat} at t={time:.3f}")


class KeplerNonConvergence(EphemerisError):
    """Kepler iteration hit its cap without meeting the threshold."""

    def __init__(self, mean_anomaly, eccentricity, iterations, delta):
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.iterations = iterations
        self.delta = delta
        super().__init__(
            f"Kepler equation did not converge after {iterations} iterations "
            f"(M={mean_anomaly:.12f}, e={eccentricity:.12f}, |dE|={abs(delta):.3e})"
        )
