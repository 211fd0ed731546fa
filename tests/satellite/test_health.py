#!/usr/bin/env python3
"""Test suite for health and accuracy interpretation"""

import pytest

from pybrdc.core.constellation import BDS_PROFILE
from pybrdc.core.exceptions import DataNotLoaded
from pybrdc.satellite.health import HealthGate, ura_value


class TestURA:

    def test_table(self):
        assert ura_value(0) == 2.4
        assert ura_value(2) == 4.85
        assert ura_value(14) == 6144.0

    def test_no_prediction(self):
        assert ura_value(15) == 0.0
        assert ura_value(-1) == 0.0
        assert ura_value(99) == 0.0


class TestHealthGate:

    def test_healthy(self, bds_meo):
        assert HealthGate(BDS_PROFILE).is_healthy(bds_meo)

    def test_unhealthy(self, make_bds_meo):
        assert not HealthGate(BDS_PROFILE).is_healthy(make_bds_meo(svh=1))

    def test_accuracy(self, make_bds_meo):
        assert HealthGate(BDS_PROFILE).accuracy(make_bds_meo(sva=3)) == 6.85

    def test_requires_loaded(self, make_bds_meo):
        with pytest.raises(DataNotLoaded):
            HealthGate(BDS_PROFILE).is_healthy(make_bds_meo(e=None))
