import math

import pytest

from assistant_marketplace_api.app.core.geo import EARTH_RADIUS_KM, distance


def test_same_point_is_zero():
    assert distance(48.8566, 2.3522, 48.8566, 2.3522) == 0


def test_symmetric():
    paris_london = distance(48.8566, 2.3522, 51.5074, -0.1278)
    london_paris = distance(51.5074, -0.1278, 48.8566, 2.3522)
    assert paris_london == pytest.approx(london_paris)


def test_paris_to_london():
    assert distance(48.8566, 2.3522, 51.5074, -0.1278) == pytest.approx(343.5, abs=1.0)


def test_one_degree_of_latitude():
    expected = EARTH_RADIUS_KM * math.pi / 180
    assert distance(0, 0, 1, 0) == pytest.approx(expected)
    assert distance(0, 0, 1, 0) == pytest.approx(111.19, abs=0.01)


def test_antipodes_are_half_the_circumference():
    assert distance(0, 0, 0, 180) == pytest.approx(EARTH_RADIUS_KM * math.pi)
