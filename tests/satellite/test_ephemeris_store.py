#!/usr/bin/env python3
"""Tests for the ephemeris store"""

import pandas as pd
import pytest

from pybrdc.core.constellation import BDS_PROFILE, GPS_PROFILE
from pybrdc.core.exceptions import (
    DataNotLoaded, EphemerisNotFound, InvalidRequest, WrongConstellation
)
from pybrdc.core.satellite_numbering import prn_to_sat
from pybrdc.core.time import GNSSTime
from pybrdc.satellite.ephemeris import EphemerisStore, SearchMethod


@pytest.fixture
def store():
    return EphemerisStore(BDS_PROFILE)


class TestAdd:

    def test_add_attaches_window(self, store, bds_meo):
        stored = store.add(bds_meo)
        assert stored.begin_valid == bds_meo.toe
        assert stored.end_valid == bds_meo.toe + 3600.0
        assert len(store) == 1
        assert bds_meo.sat in store
        assert store.initial_time == stored.begin_valid
        assert store.final_time == stored.end_valid

    def test_duplicate_returns_existing(self, store, bds_meo, make_bds_meo):
        first = store.add(bds_meo)
        again = store.add(make_bds_meo())
        assert again is first
        assert store.size() == 1

    def test_same_epoch_new_issue_kept(self, store, bds_meo, make_bds_meo):
        store.add(bds_meo)
        store.add(make_bds_meo(iode=2, iodc=2))
        assert store.size() == 2

    def test_records_ordered(self, store, bds_meo, make_bds_meo):
        toe = bds_meo.toe
        store.add(make_bds_meo(toe=toe + 3600.0, transmit_time=toe + 3300.0))
        store.add(make_bds_meo(toe=toe, transmit_time=toe + 600.0, iode=2))
        store.add(bds_meo)
        keys = [(r.toe, r.transmit_time) for r in store.records(bds_meo.sat)]
        assert keys == sorted(keys)
        assert store.initial_time == toe
        assert store.final_time == toe + 7200.0

    def test_wrong_constellation(self, store, gps_record):
        with pytest.raises(WrongConstellation) as excinfo:
            store.add(gps_record)
        assert isinstance(excinfo.value, InvalidRequest)
        assert store.size() == 0

    def test_incomplete_record(self, store, make_bds_meo):
        with pytest.raises(DataNotLoaded):
            store.add(make_bds_meo(M0=None))
        assert store.size() == 0

    def test_add_all(self, store, bds_meo, make_bds_meo, bds_geo):
        added = store.add_all([bds_meo, make_bds_meo(), bds_geo])
        assert added == 2
        assert store.satellites() == sorted([bds_meo.sat, bds_geo.sat])


class TestFind:

    def test_inclusive_edges(self, store, bds_meo):
        stored = store.add(bds_meo)
        assert store.find(bds_meo.sat, stored.begin_valid) is stored
        assert store.find(bds_meo.sat, stored.end_valid) is stored

    def test_outside_window(self, store, bds_meo):
        stored = store.add(bds_meo)
        with pytest.raises(EphemerisNotFound) as excinfo:
            store.find(bds_meo.sat, stored.end_valid + 1e-3)
        assert isinstance(excinfo.value, InvalidRequest)
        with pytest.raises(EphemerisNotFound):
            store.find(bds_meo.sat, stored.begin_valid - 1e-3)

    def test_unknown_satellite(self, store, bds_meo):
        store.add(bds_meo)
        with pytest.raises(EphemerisNotFound):
            store.find(prn_to_sat('C', 30), bds_meo.toe)

    def test_wrong_constellation(self, store, bds_meo):
        store.add(bds_meo)
        with pytest.raises(WrongConstellation):
            store.find(prn_to_sat('G', 11), bds_meo.toe)

    def test_store_usable_after_failure(self, store, bds_meo):
        stored = store.add(bds_meo)
        with pytest.raises(EphemerisNotFound):
            store.find(bds_meo.sat, bds_meo.toe - 1e5)
        assert store.find(bds_meo.sat, bds_meo.toe + 10.0) is stored

    def test_gnss_time_query(self, store, bds_meo):
        stored = store.add(bds_meo)
        t = GNSSTime.from_seconds(bds_meo.toe + 10.0, 'BDS')
        assert store.find(bds_meo.sat, t) is stored

    def test_every_find_is_within_window(self, store, bds_meo, make_bds_meo):
        toe = bds_meo.toe
        store.add_all([
            bds_meo,
            make_bds_meo(toe=toe + 3600.0, transmit_time=toe + 3300.0, iode=2),
            make_bds_meo(toe=toe + 7200.0, transmit_time=toe + 7500.0, iode=3),
        ])
        t = toe - 100.0
        while t < toe + 11000.0:
            try:
                eph = store.find(bds_meo.sat, t)
            except EphemerisNotFound:
                assert not any(r.begin_valid <= t <= r.end_valid
                               for r in store.records(bds_meo.sat))
            else:
                assert eph.begin_valid <= t <= eph.end_valid
            t += 97.0

    def test_stale_record_never_selected(self, store, bds_meo, make_bds_meo):
        """A record sent after its own end of validity does not win at end_valid"""
        stored = store.add(bds_meo)
        stale = store.add(make_bds_meo(transmit_time=bds_meo.toe + 4000.0, iode=9, iodc=9))
        assert stale.begin_valid == stale.end_valid == stored.end_valid
        assert store.find(bds_meo.sat, stored.end_valid) is stored

        store.drop_satellite(bds_meo.sat)
        store.add(stale)
        with pytest.raises(EphemerisNotFound):
            store.find(bds_meo.sat, stale.end_valid)


class TestSearchMethods:

    @pytest.fixture
    def overlapping(self, make_bds_meo, bds_meo):
        toe = bds_meo.toe
        # issue uploaded mid-hour: window [toe+1000, toe+3600]
        update = make_bds_meo(transmit_time=toe + 1000.0, iode=2, iodc=2)
        # next hour's issue sent early: window [toe+1800, toe+5400]
        next_hour = make_bds_meo(toe=toe + 1800.0, transmit_time=toe + 600.0, iode=3, iodc=3)
        return [bds_meo, update, next_hour]

    def test_user_prefers_latest_transmission(self, overlapping, bds_meo):
        store = EphemerisStore(BDS_PROFILE, search_method=SearchMethod.USER)
        store.add_all(overlapping)
        eph = store.find(bds_meo.sat, bds_meo.toe + 2000.0)
        assert eph.iode == 2

    def test_nearest_prefers_closest_toe(self, overlapping, bds_meo):
        store = EphemerisStore(BDS_PROFILE, search_method=SearchMethod.NEAREST)
        store.add_all(overlapping)
        eph = store.find(bds_meo.sat, bds_meo.toe + 2000.0)
        assert eph.iode == 3

    def test_nearest_tie_goes_to_later_transmission(self, overlapping, bds_meo):
        store = EphemerisStore(BDS_PROFILE, search_method=SearchMethod.NEAREST)
        store.add_all(overlapping)
        eph = store.find(bds_meo.sat, bds_meo.toe + 1200.0)
        assert eph.iode == 2

    def test_healthy_only(self, store, bds_meo, make_bds_meo):
        store.add(bds_meo)
        store.add(make_bds_meo(transmit_time=bds_meo.toe + 600.0, iode=2, svh=1))
        t = bds_meo.toe + 900.0
        assert store.find(bds_meo.sat, t).svh == 1
        assert store.find(bds_meo.sat, t, healthy_only=True).iode == 1


class TestMaintenance:

    def test_rationalize(self, store, bds_meo, make_bds_meo):
        toe = bds_meo.toe
        store.add(make_bds_meo(transmit_time=toe - 100.0))     # later copy of the same issue
        store.add(bds_meo)                                     # earliest copy, kept
        store.add(make_bds_meo(transmit_time=toe + 4000.0, iode=9, iodc=9))  # stale
        assert store.size() == 3

        assert store.rationalize() == 2
        remaining = store.records(bds_meo.sat)
        assert len(remaining) == 1
        assert remaining[0].transmit_time == toe - 300.0
        assert store.rationalize() == 0

    def test_rationalize_keeps_changed_content(self, store, bds_meo, make_bds_meo):
        """A later copy of the same issue with a new health code is not redundant"""
        toe = bds_meo.toe
        store.add(bds_meo)
        store.add(make_bds_meo(transmit_time=toe + 600.0, svh=1))
        store.add(make_bds_meo(transmit_time=toe + 900.0, svh=1))   # repeats the previous copy
        t = toe + 1200.0
        assert store.find(bds_meo.sat, t).svh == 1

        assert store.rationalize() == 1
        assert [r.svh for r in store.records(bds_meo.sat)] == [0, 1]
        assert store.find(bds_meo.sat, t).svh == 1
        assert store.find(bds_meo.sat, t).transmit_time == toe + 600.0
        assert store.rationalize() == 0

    def test_rationalize_updates_bounds(self, store, bds_geo, make_bds_geo):
        store.add(bds_geo)
        store.add(make_bds_geo(toe=bds_geo.toe + 7200.0, transmit_time=bds_geo.toe + 20000.0))
        store.rationalize()
        assert store.final_time == bds_geo.toe + 3600.0

    def test_clear(self, store, bds_meo, bds_geo):
        store.add_all([bds_meo, bds_geo])
        store.clear()
        assert store.size() == 0
        assert store.satellites() == []
        assert store.initial_time is None
        assert store.final_time is None
        with pytest.raises(EphemerisNotFound):
            store.find(bds_meo.sat, bds_meo.toe)
        store.add(bds_meo)
        assert store.size() == 1

    def test_drop_satellite(self, store, bds_meo, bds_geo):
        store.add_all([bds_meo, bds_geo])
        assert store.drop_satellite(bds_geo.sat) == 1
        assert bds_geo.sat not in store
        assert store.drop_satellite(bds_geo.sat) == 0

    def test_edit(self, store, bds_meo, make_bds_meo):
        toe = bds_meo.toe
        store.add_all([
            bds_meo,
            make_bds_meo(toe=toe + 7200.0, transmit_time=toe + 7000.0, iode=2),
            make_bds_meo(toe=toe + 14400.0, transmit_time=toe + 14000.0, iode=3),
        ])
        assert store.edit(toe + 7000.0, toe + 9000.0) == 2
        assert [r.iode for r in store.records(bds_meo.sat)] == [2]
        assert store.initial_time == toe + 7200.0

    def test_add_to_list_is_a_snapshot(self, store, bds_meo, bds_geo, make_bds_meo):
        store.add_all([bds_meo, bds_geo])
        snapshot = store.add_to_list()
        assert [r.sat for r in snapshot] == sorted([bds_meo.sat, bds_geo.sat])

        snapshot.clear()
        assert store.size() == 2

        single = store.add_to_list(bds_meo.sat)
        store.add(make_bds_meo(iode=5))
        store.clear()
        assert len(single) == 1
        assert single[0].sat == bds_meo.sat

    def test_to_dataframe(self, store, bds_meo, bds_geo):
        store.add_all([bds_meo, bds_geo])
        df = store.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 2
        assert list(df['sat_id']) == ["C03", "C11"]
        assert (df['end_valid'] - df['toe'] == 3600.0).all()
        assert store.to_dataframe(bds_meo.sat)['ura'].iloc[0] == 4.85
        assert store.to_dataframe(prn_to_sat('C', 40)).empty


class TestDump:

    def test_detail_levels(self, store, bds_meo, bds_geo):
        store.add_all([bds_meo, bds_geo])
        summary = store.dump()
        assert "2 satellites, 2 records" in summary
        assert "C11: 1 records" in summary

        table = store.dump(detail=1)
        assert "IODC" in table
        assert table.count(" C03 !") == 1

        full = store.dump(detail=2)
        assert full.count("BeiDou-SPECIFIC PARAMETERS") == 2

    def test_empty_store(self):
        store = EphemerisStore(GPS_PROFILE, name="test store")
        text = store.dump()
        assert "Dump of test store" in text
        assert "0 satellites, 0 records" in text
        assert "Span" not in text
