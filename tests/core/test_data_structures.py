#!/usr/bin/env python3
"""Test suite for data structures"""

import dataclasses

import numpy as np
import pytest

from pybrdc.core.constants import SYS_BDS, SYS_GPS, WEEK_SECONDS
from pybrdc.core.data_structures import (
    REQUIRED_FIELDS, BroadcastRecord, OrbitModel, OrbitState
)
from pybrdc.core.exceptions import DataNotLoaded, EphemerisError


class TestBroadcastRecord:
    """Test the broadcast record container"""

    def test_empty_record_not_loaded(self):
        rec = BroadcastRecord()
        assert not rec.data_loaded
        assert set(rec.missing_fields) == set(REQUIRED_FIELDS)
        with pytest.raises(DataNotLoaded) as excinfo:
            rec.require_loaded()
        assert isinstance(excinfo.value, EphemerisError)
        assert 'toe' in excinfo.value.missing

    def test_loaded_record(self, bds_meo):
        assert bds_meo.data_loaded
        bds_meo.require_loaded()
        assert bds_meo.system == SYS_BDS
        assert bds_meo.prn == 11
        assert bds_meo.sat_id == "C11"

    def test_partial_record_reports_missing(self, make_bds_meo):
        rec = make_bds_meo(cuc=None, f2=None)
        assert rec.missing_fields == ('cuc', 'f2')

    def test_toc_defaults_to_toe(self, bds_meo, make_bds_meo):
        assert bds_meo.toc == bds_meo.toe
        rec = make_bds_meo(toc=bds_meo.toe - 60.0)
        assert rec.toc == bds_meo.toe - 60.0

    def test_immutable(self, bds_meo):
        with pytest.raises(dataclasses.FrozenInstanceError):
            bds_meo.toe = 0.0

    def test_tgd_stored_as_tuple(self, make_gps):
        rec = make_gps(tgd=[1e-9, 2e-9])
        assert rec.tgd == (1e-9, 2e-9)
        assert rec.system == SYS_GPS

    def test_toe_tow(self, bds_meo):
        assert bds_meo.toe_tow == 259200.0
        assert bds_meo.toe - bds_meo.toe_tow == 900 * WEEK_SECONDS

    def test_with_validity_returns_copy(self, bds_meo):
        assert not bds_meo.has_validity
        stored = bds_meo.with_validity(bds_meo.toe, bds_meo.toe + 3600.0)
        assert stored is not bds_meo
        assert stored.has_validity
        assert not bds_meo.has_validity
        assert stored.end_valid == bds_meo.toe + 3600.0

    def test_same_data_ignores_window(self, bds_meo, make_bds_meo):
        stored = bds_meo.with_validity(1.0, 2.0)
        assert stored.same_data(bds_meo)
        assert not make_bds_meo(iode=2).same_data(bds_meo)
        assert not make_bds_meo(transmit_time=bds_meo.toe).same_data(bds_meo)

    def test_same_data_ignoring_fields(self, bds_meo, make_bds_meo):
        resent = make_bds_meo(transmit_time=bds_meo.toe + 600.0)
        assert resent.same_data(bds_meo, ignore=('transmit_time',))
        assert not make_bds_meo(transmit_time=bds_meo.toe + 600.0, svh=1).same_data(
            bds_meo, ignore=('transmit_time',))


class TestOrbitState:
    """Test propagation output container"""

    def test_defaults(self):
        state = OrbitState()
        np.testing.assert_array_equal(state.pos, np.zeros(3))
        np.testing.assert_array_equal(state.vel, np.zeros(3))
        assert state.model is OrbitModel.STANDARD

    def test_clock_correction_and_radius(self):
        state = OrbitState(pos=np.array([3.0, 4.0, 12.0]), clock_bias=1e-4, relcorr=-2e-8)
        assert state.clock_correction == pytest.approx(1e-4 - 2e-8)
        assert state.radius == pytest.approx(13.0)

    def test_default_arrays_not_shared(self):
        a = OrbitState()
        b = OrbitState()
        a.pos[0] = 1.0
        assert b.pos[0] == 0.0
