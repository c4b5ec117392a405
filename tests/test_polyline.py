"""Tests for the Encoded Polyline Algorithm Format codec."""

import logging
import math

import pytest

from gaia_geometry.core.constants import HIGH_PRECISION
from gaia_geometry.core.polyline import decode, encode
from gaia_geometry.models import GeoCoordinate

# Canonical example from Google's algorithm description.
GOOGLE_POINTS = [(38.5, -120.2), (40.7, -120.95), (43.252, -126.453)]
GOOGLE_ENCODED = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def coords(pairs):
    return [GeoCoordinate(latitude=lat, longitude=lon) for lat, lon in pairs]


def assert_coords_close(actual, expected_pairs, abs_tol):
    assert len(actual) == len(expected_pairs)
    for c, (lat, lon) in zip(actual, expected_pairs):
        assert c.latitude == pytest.approx(lat, abs=abs_tol)
        assert c.longitude == pytest.approx(lon, abs=abs_tol)


class TestEncode:
    def test_known_vector(self):
        assert encode(coords(GOOGLE_POINTS)) == GOOGLE_ENCODED

    def test_empty(self):
        assert encode([]) == ""

    def test_single_point(self):
        # -179.9832104 is Google's single-value example.
        encoded = encode(coords([(0.0, -179.9832104)]))
        assert encoded == "?`~oia@"

    def test_output_alphabet(self):
        encoded = encode(coords([(89.99999, 179.99999), (-89.99999, -179.99999), (0.0, 0.0)]))
        assert all(63 <= ord(ch) <= 126 for ch in encoded)

    def test_accepts_generators(self):
        encoded = encode(c for c in coords(GOOGLE_POINTS))
        assert encoded == GOOGLE_ENCODED

    def test_high_precision_differs(self):
        points = coords([(37.774929, -122.419416)])
        assert encode(points, precision=HIGH_PRECISION) != encode(points)

    def test_skips_non_finite_coordinates(self):
        assert encode(coords([(math.nan, 0.0)])) == ""
        pairs = [GOOGLE_POINTS[0], (math.inf, 0.0), GOOGLE_POINTS[1], (0.0, math.nan), GOOGLE_POINTS[2]]
        assert encode(coords(pairs)) == GOOGLE_ENCODED

    def test_skipped_coordinates_are_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gaia_geometry.core.polyline"):
            encode(coords([(0.0, -math.inf)]))
        assert "non-finite" in caplog.text

    @pytest.mark.parametrize("precision", [0, -1e5])
    def test_rejects_non_positive_precision(self, precision):
        with pytest.raises(ValueError):
            encode(coords(GOOGLE_POINTS), precision=precision)


class TestDecode:
    def test_known_vector(self):
        decoded = decode(GOOGLE_ENCODED)
        assert decoded is not None
        assert_coords_close(decoded, GOOGLE_POINTS, abs_tol=1e-5)

    def test_empty(self):
        assert decode("") == []

    def test_returns_geo_coordinates(self):
        decoded = decode(GOOGLE_ENCODED)
        assert all(isinstance(c, GeoCoordinate) for c in decoded)

    def test_truncated_inside_value(self):
        # "_p~iF" is a full latitude; "~p" leaves the longitude unfinished.
        assert decode("_p~iF~p") is None

    def test_continuation_on_last_byte(self):
        # "_" (95 - 63 = 32) has the continuation bit set and nothing follows.
        assert decode("_") is None

    def test_latitude_without_longitude(self):
        assert decode("_p~iF") is None

    def test_truncated_path_rejects_everything(self):
        # Valid first point followed by half of the second.
        assert decode(GOOGLE_ENCODED[:12]) is None

    def test_too_many_groups(self):
        # Seven continuation groups for a single value.
        assert decode("_______?" + "?") is None

    def test_six_groups_allowed(self):
        decoded = decode("_____??")
        assert decoded is not None
        assert len(decoded) == 1

    @pytest.mark.parametrize("bad", ["_p~iF~ps|U ", "\x7f?", "?>"])
    def test_out_of_range_characters(self, bad):
        assert decode(bad) is None

    def test_failure_is_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="gaia_geometry.core.polyline"):
            assert decode("_") is None
        assert "Rejected encoded path" in caplog.text

    @pytest.mark.parametrize("precision", [0, -1.0])
    def test_rejects_non_positive_precision(self, precision):
        with pytest.raises(ValueError):
            decode(GOOGLE_ENCODED, precision=precision)


class TestRoundTrip:
    def test_five_digit_coordinates(self):
        pairs = [
            (37.77493, -122.41942),
            (37.77501, -122.41801),
            (-33.86882, 151.20929),
            (0.0, 0.0),
            (-0.00001, 0.00001),
            (89.99999, -179.99999),
        ]
        decoded = decode(encode(coords(pairs)))
        assert_coords_close(decoded, pairs, abs_tol=1e-5)
        assert decoded == coords(pairs)

    def test_high_precision(self):
        pairs = [(37.774929, -122.419416), (37.775012, -122.418011), (-33.868820, 151.209296)]
        decoded = decode(encode(coords(pairs), HIGH_PRECISION), HIGH_PRECISION)
        assert_coords_close(decoded, pairs, abs_tol=1e-6)

    def test_precision_mismatch_scales_values(self):
        encoded = encode(coords([(1.0, 2.0)]), HIGH_PRECISION)
        decoded = decode(encoded)
        assert_coords_close(decoded, [(10.0, 20.0)], abs_tol=1e-9)
