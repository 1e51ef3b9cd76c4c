import threading

import pytest

from utils.coordinates import BASE_COORDINATE, GeoCoordinate
from utils.location import (
    BackgroundLocationProvider,
    EnvironmentLocationProvider,
    LocationUnavailable,
    StaticLocationProvider,
    UserLocationResolver,
    parse_coordinates,
)


class FailingProvider:
    def request_position(self, on_success, on_error):
        on_error(LocationUnavailable("permission denied"))


class RaisingProvider:
    def request_position(self, on_success, on_error):
        raise RuntimeError("sensor offline")


class SilentProvider:
    """Never calls back."""
    def request_position(self, on_success, on_error):
        self.callbacks = (on_success, on_error)


class TestUserLocationResolver:

    def test_no_provider_uses_fallback(self):
        results = []
        UserLocationResolver().resolve(results.append)
        assert results == [BASE_COORDINATE]

    def test_provider_success(self):
        results = []
        resolver = UserLocationResolver(StaticLocationProvider((40.65, -73.95)))
        resolver.resolve(results.append)
        assert results == [GeoCoordinate(40.65, -73.95)]
        assert resolver.location == GeoCoordinate(40.65, -73.95)

    def test_provider_error_uses_fallback(self):
        results = []
        UserLocationResolver(FailingProvider()).resolve(results.append)
        assert results == [BASE_COORDINATE]

    def test_raising_provider_uses_fallback(self):
        results = []
        UserLocationResolver(RaisingProvider()).resolve(results.append)
        assert results == [BASE_COORDINATE]

    def test_custom_fallback(self):
        results = []
        UserLocationResolver(FailingProvider(), fallback=GeoCoordinate(1.0, 2.0)).resolve(results.append)
        assert results == [GeoCoordinate(1.0, 2.0)]

    def test_silent_provider_never_resolves(self):
        results = []
        resolver = UserLocationResolver(SilentProvider())
        resolver.resolve(results.append)
        assert results == []
        assert not resolver.resolved

    def test_settles_once(self):
        provider = SilentProvider()
        results = []
        UserLocationResolver(provider).resolve(results.append)
        on_success, on_error = provider.callbacks
        on_success(GeoCoordinate(40.0, -73.0))
        on_error(LocationUnavailable("late"))
        on_success(GeoCoordinate(41.0, -72.0))
        assert results == [GeoCoordinate(40.0, -73.0)]

    def test_failing_callback_does_not_propagate(self):
        def explode(location):
            raise RuntimeError("host bug")

        UserLocationResolver(StaticLocationProvider((40.0, -73.0))).resolve(explode)

    def test_background_provider(self):
        done = threading.Event()
        results = []

        def on_resolved(location):
            results.append(location)
            done.set()

        UserLocationResolver(BackgroundLocationProvider(lambda: (40.6, -73.9))).resolve(on_resolved)
        assert done.wait(timeout=5)
        assert results == [GeoCoordinate(40.6, -73.9)]

    def test_background_provider_failure(self):
        done = threading.Event()
        results = []

        def lookup():
            raise TimeoutError("no fix")

        def on_resolved(location):
            results.append(location)
            done.set()

        UserLocationResolver(BackgroundLocationProvider(lookup)).resolve(on_resolved)
        assert done.wait(timeout=5)
        assert results == [BASE_COORDINATE]


class TestEnvironmentProvider:

    def test_reads_lat_lng(self, monkeypatch):
        monkeypatch.setenv("DISASTER_MAP_USER_LOCATION", "40.75, -73.99")
        results = []
        UserLocationResolver(EnvironmentLocationProvider()).resolve(results.append)
        assert results == [GeoCoordinate(40.75, -73.99)]

    @pytest.mark.parametrize("value", ["", "nowhere", "40.7"])
    def test_bad_value_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("DISASTER_MAP_USER_LOCATION", value)
        results = []
        UserLocationResolver(EnvironmentLocationProvider()).resolve(results.append)
        assert results == [BASE_COORDINATE]

    def test_unset_falls_back(self, monkeypatch):
        monkeypatch.delenv("DISASTER_MAP_USER_LOCATION", raising=False)
        results = []
        UserLocationResolver(EnvironmentLocationProvider()).resolve(results.append)
        assert results == [BASE_COORDINATE]

    def test_parse_coordinates(self):
        assert parse_coordinates("1.5,2.5") == (1.5, 2.5)
        assert parse_coordinates("a,b") == (None, None)
        assert parse_coordinates(None) == (None, None)
