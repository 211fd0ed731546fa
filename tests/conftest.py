"""Shared broadcast records for the test suite"""

import pytest

from pybrdc.core.constants import WEEK_SECONDS
from pybrdc.core.data_structures import BroadcastRecord
from pybrdc.core.satellite_numbering import prn_to_sat

# BDT week 900, Wednesday 00:00
BDS_TOE = 900 * WEEK_SECONDS + 259200.0
# GPS week 2256, Wednesday 00:00
GPS_TOE = 2256 * WEEK_SECONDS + 259200.0


def bds_meo_params(**overrides):
    """C11-like medium Earth orbit"""
    params = dict(
        sat=prn_to_sat('C', 11),
        toe=BDS_TOE,
        transmit_time=BDS_TOE - 300.0,
        iodc=1, iode=1, week=900,
        A=5282.6262 ** 2,
        e=1.2483e-3,
        i0=0.9638,
        idot=-1.5e-10,
        OMG0=-2.0412,
        OMGd=-6.83e-9,
        omg=-0.6613,
        M0=1.2007,
        deln=3.857e-9,
        cuc=-6.15e-7, cus=9.25e-6,
        crc=171.5, crs=-14.2,
        cic=-1.2e-8, cis=3.4e-8,
        f0=-4.2e-4, f1=5.1e-11, f2=0.0,
        tgd=(1.2e-8, -3.0e-9),
        svh=0, sva=2,
    )
    params.update(overrides)
    return params


def bds_geo_params(**overrides):
    """C03-like geostationary orbit"""
    params = dict(
        sat=prn_to_sat('C', 3),
        toe=BDS_TOE,
        transmit_time=BDS_TOE - 300.0,
        iodc=1, iode=1, week=900,
        A=6493.4478 ** 2,
        e=5.212e-4,
        i0=0.0339,
        idot=4.1e-11,
        OMG0=2.9512,
        OMGd=2.27e-9,
        omg=-2.6451,
        M0=-1.9884,
        deln=5.3e-10,
        cuc=2.1e-6, cus=5.8e-6,
        crc=-188.4, crs=64.1,
        cic=-4.6e-8, cis=1.8e-8,
        f0=1.6e-4, f1=-3.2e-11, f2=0.0,
        svh=0, sva=2,
    )
    params.update(overrides)
    return params


def gps_params(**overrides):
    """G05-like GPS orbit"""
    params = dict(
        sat=prn_to_sat('G', 5),
        toe=GPS_TOE,
        transmit_time=GPS_TOE - 600.0,
        iodc=77, iode=77, week=2256,
        A=5153.6557 ** 2,
        e=5.4e-3,
        i0=0.9617,
        idot=2.0e-10,
        OMG0=1.3456,
        OMGd=-8.1e-9,
        omg=0.8765,
        M0=-2.3456,
        deln=4.6e-9,
        cuc=1.1e-6, cus=7.3e-6,
        crc=243.2, crs=21.5,
        cic=6.0e-8, cis=-1.3e-8,
        f0=-1.1e-4, f1=-2.2e-12, f2=0.0,
        tgd=(-1.1e-8,),
        svh=0, sva=0, fit=4.0,
    )
    params.update(overrides)
    return params


@pytest.fixture
def make_bds_meo():
    return lambda **kw: BroadcastRecord(**bds_meo_params(**kw))


@pytest.fixture
def make_bds_geo():
    return lambda **kw: BroadcastRecord(**bds_geo_params(**kw))


@pytest.fixture
def make_gps():
    return lambda **kw: BroadcastRecord(**gps_params(**kw))


@pytest.fixture
def bds_meo(make_bds_meo):
    return make_bds_meo()


@pytest.fixture
def bds_geo(make_bds_geo):
    return make_bds_geo()


@pytest.fixture
def gps_record(make_gps):
    return make_gps()
