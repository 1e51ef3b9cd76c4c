import numpy as np
import pytest

from utils.coordinates import (
    BASE_COORDINATE,
    CoordinateTransform,
    GeoCoordinate,
    SyntheticGeocoder,
    pixel_to_geo,
)


class TestPixelToGeo:
    """
    Click pixel -> approximate NYC coordinate.
    """

    @pytest.mark.parametrize("x,y,w,h", [
        (0, 0, 400, 300),
        (400, 300, 400, 300),
        (123, 45, 800, 384),
        (17.5, 299.25, 640, 480),
    ])
    def test_matches_affine_formula_exactly(self, x, y, w, h):
        coord = pixel_to_geo(x, y, w, h)
        assert coord.latitude == 40.7128 + (0.5 - y / h) * 0.3
        assert coord.longitude == -74.0060 + (x / w - 0.5) * 0.4

    def test_center_maps_to_base(self):
        assert pixel_to_geo(200, 150, 400, 300) == GeoCoordinate(40.7128, -74.0060)

    def test_top_left_is_north_west(self):
        coord = pixel_to_geo(0, 0, 400, 300)
        assert coord.latitude > BASE_COORDINATE.latitude
        assert coord.longitude < BASE_COORDINATE.longitude

    def test_outside_canvas_is_not_clamped(self):
        coord = pixel_to_geo(800, -300, 400, 300)
        assert coord.latitude == pytest.approx(40.7128 + 0.45)
        assert coord.longitude == pytest.approx(-74.0060 + 0.6)

    def test_custom_parameters(self):
        transform = CoordinateTransform(base=GeoCoordinate(0.0, 0.0), lat_span=2.0, lng_span=4.0)
        assert transform.pixel_to_geo(100, 0, 100, 100) == GeoCoordinate(1.0, 2.0)

    @pytest.mark.parametrize("w,h", [(0, 300), (400, 0), (-1, 10)])
    def test_zero_size_canvas_raises(self, w, h):
        with pytest.raises(ValueError):
            pixel_to_geo(0, 0, w, h)

    def test_readout_format(self):
        assert GeoCoordinate(40.7128, -74.006).format_readout() == "Lat: 40.7128, Lng: -74.0060"


class TestSyntheticGeocoder:

    @pytest.mark.parametrize("kind,span", [("disaster", 0.15), ("resource", 0.12)])
    def test_stays_within_jitter_span(self, kind, span):
        geocoder = SyntheticGeocoder(rng=np.random.default_rng(7))
        for _ in range(200):
            coord = geocoder.assign(kind)
            assert abs(coord.latitude - BASE_COORDINATE.latitude) <= span / 2
            assert abs(coord.longitude - BASE_COORDINATE.longitude) <= span / 2

    def test_same_seed_is_reproducible(self):
        first = SyntheticGeocoder(rng=np.random.default_rng(42))
        second = SyntheticGeocoder(rng=np.random.default_rng(42))
        assert [first.assign("disaster") for _ in range(5)] == [second.assign("disaster") for _ in range(5)]

    def test_successive_draws_differ(self):
        geocoder = SyntheticGeocoder(rng=np.random.default_rng(1))
        assert geocoder.assign("resource") != geocoder.assign("resource")

    def test_unknown_kind_uses_disaster_span(self):
        geocoder = SyntheticGeocoder(rng=np.random.default_rng(3))
        coord = geocoder.assign("volcano")
        assert abs(coord.latitude - BASE_COORDINATE.latitude) <= 0.075

    def test_from_env_seed(self, monkeypatch):
        monkeypatch.setenv("DISASTER_MAP_GEO_SEED", "11")
        first = SyntheticGeocoder.from_env().assign("disaster")
        second = SyntheticGeocoder.from_env().assign("disaster")
        assert first == second

    def test_from_env_ignores_bad_seed(self, monkeypatch):
        monkeypatch.setenv("DISASTER_MAP_GEO_SEED", "not-a-number")
        assert isinstance(SyntheticGeocoder.from_env().assign("disaster"), GeoCoordinate)
