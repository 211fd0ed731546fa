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

"""Kepler's equation solver"""

import math

from numba import njit

from ..core.constants import KEPLER_MAX_ITER, KEPLER_TOL
from ..core.exceptions import KeplerNonConvergence


@njit(cache=True)
def _kepler_kernel(M, e, tol, max_iter):
    """
    Newton iteration on M = E - e*sin(E).

    Returns
    -------
    E : float
        Last eccentric anomaly estimate (rad)
    delta : float
        Last increment applied to E (rad)
    n_iter : int
        Number of increments applied
    """
    E = M + e * math.sin(M)
    delta = 0.0
    n_iter = 0
    while n_iter < max_iter:
        delta = (M - E + e * math.sin(E)) / (1.0 - e * math.cos(E))
        E += delta
        n_iter += 1
        if abs(delta) < tol:
            break
    return E, delta, n_iter


def solve_kepler(M: float, e: float,
                 tol: float = KEPLER_TOL,
                 max_iter: int = KEPLER_MAX_ITER) -> tuple[float, int]:
    """
    Solve Kepler's equation for the eccentric anomaly.

    Starts from E0 = M + e*sin(M) and applies
    E <- E + (M - E + e*sin(E)) / (1 - e*cos(E)) until the increment is
    below ``tol``.

    Parameters
    ----------
    M : float
        Mean anomaly (rad)
    e : float
        Eccentricity, 0 <= e < 1
    tol : float
        Convergence threshold on the increment (rad)
    max_iter : int
        Iteration cap

    Returns
    -------
    E : float
        Eccentric anomaly (rad)
    n_iter : int
        Iterations used

    Raises
    ------
    KeplerNonConvergence
        If the cap is reached while the last increment is still >= tol
    ValueError
        If e is outside [0, 1)
    """
    if not 0.0 <= e < 1.0:
        raise ValueError(f"Eccentricity must be in [0, 1): {e}")
    if max_iter < 1:
        raise ValueError(f"Iteration cap must be positive: {max_iter}")

    E, delta, n_iter = _kepler_kernel(float(M), float(e), float(tol), int(max_iter))
    if not abs(delta) < tol:
        raise KeplerNonConvergence(M, e, n_iter, delta)
    return E, n_iter
