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
pybrdc - Broadcast Ephemeris Store and Orbit Propagation

A Python library that keeps broadcast navigation records per satellite,
selects the authoritative record at any time, and computes satellite
position, velocity and clock correction from it, including the BeiDou
GEO frame rotation.
"""

__version__ = "1.0.0"
__author__ = "pybrdc Development Team"
__title__ = "pybrdc"
__description__ = "Broadcast ephemeris store and orbit propagation"

from .core import *
from .satellite import *
