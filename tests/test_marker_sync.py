import numpy as np
import pytest

from utils.coordinates import GeoCoordinate, SyntheticGeocoder
from utils.layout import LayoutPosition
from utils.marker_sync import IDLE, MarkerSynchronizer, build_inputs
from utils.models import DisasterRecord, ResourceRecord


def make_disasters(n):
    return [{"id": f"d{i}", "title": f"Disaster {i}"} for i in range(n)]


def make_resources(m):
    return [
        {"id": f"r{i}", "name": f"Resource {i}", "type": "shelter", "availability_status": "available"}
        for i in range(m)
    ]


@pytest.fixture
def synchronizer():
    return MarkerSynchronizer(geocoder=SyntheticGeocoder(rng=np.random.default_rng(0)))


class TestMarkerCount:

    @pytest.mark.parametrize("n,m", [(0, 0), (1, 0), (0, 3), (5, 7), (10, 2)])
    def test_count_is_disasters_plus_resources(self, synchronizer, n, m):
        markers = synchronizer.sync(make_disasters(n), make_resources(m))
        assert len(markers) == n + m
        assert len(markers.disasters) == n
        assert len(markers.resources) == m
        assert markers.user is None

    @pytest.mark.parametrize("n,m", [(0, 0), (2, 3), (6, 1)])
    def test_user_location_adds_exactly_one(self, synchronizer, n, m):
        without = len(synchronizer.sync(make_disasters(n), make_resources(m)))
        with_user = synchronizer.sync(make_disasters(n), make_resources(m),
                                      user_location=GeoCoordinate(40.7, -74.0))
        assert len(with_user) == without + 1
        assert with_user.user.position == LayoutPosition(45, 45)
        assert with_user.user.marker.coordinate == GeoCoordinate(40.7, -74.0)

    def test_user_location_accepts_plain_tuple(self, synchronizer):
        markers = synchronizer.sync([], [], user_location=(40.0, -73.0))
        assert markers.user.marker.coordinate == GeoCoordinate(40.0, -73.0)


class TestSelection:

    def test_exactly_one_highlighted(self, synchronizer):
        disasters = make_disasters(6)
        markers = synchronizer.sync(disasters, make_resources(4), selected=disasters[3])
        assert [m.id for m in markers.highlighted] == ["d3"]
        assert all(not m.style.highlighted for m in markers.resources)

    @pytest.mark.parametrize("selection", ["d1", {"id": "d1"}, DisasterRecord(id="d1", title="x")])
    def test_selection_forms(self, synchronizer, selection):
        markers = synchronizer.sync(make_disasters(3), [], selected=selection)
        assert [m.id for m in markers.highlighted] == ["d1"]

    def test_no_match_highlights_nothing(self, synchronizer):
        markers = synchronizer.sync(make_disasters(3), [], selected="missing")
        assert markers.highlighted == ()

    def test_resource_with_same_id_is_not_highlighted(self, synchronizer):
        resources = [{"id": "d0", "name": "Same id", "type": "food", "availability_status": "full"}]
        markers = synchronizer.sync(make_disasters(1), resources, selected="d0")
        assert [m.kind for m in markers.highlighted] == ["disaster"]


class TestRebuild:

    def test_rebuild_keeps_layout_but_regenerates_geo(self):
        synchronizer = MarkerSynchronizer()
        inputs = build_inputs(make_disasters(4), make_resources(4))

        first = synchronizer.rebuild(inputs)
        second = synchronizer.rebuild(inputs)

        assert len(first) == len(second)
        assert [m.position for m in first] == [m.position for m in second]
        assert [m.marker.coordinate for m in first] != [m.marker.coordinate for m in second]
        assert second.cycle == first.cycle + 1

    def test_seeded_rebuilds_are_reproducible(self):
        inputs = build_inputs(make_disasters(3), make_resources(2))
        first = MarkerSynchronizer(SyntheticGeocoder(np.random.default_rng(5))).rebuild(inputs)
        second = MarkerSynchronizer(SyntheticGeocoder(np.random.default_rng(5))).rebuild(inputs)
        assert first.map_markers == second.map_markers

    def test_unchanged_inputs_do_not_rebuild(self, synchronizer):
        first = synchronizer.sync(make_disasters(2), make_resources(1))
        second = synchronizer.sync(make_disasters(2), make_resources(1))
        assert second is first
        assert synchronizer.rebuild_count == 1

    def test_selection_change_triggers_rebuild(self, synchronizer):
        synchronizer.sync(make_disasters(2), [])
        synchronizer.sync(make_disasters(2), [], selected="d1")
        assert synchronizer.rebuild_count == 2

    def test_previous_markers_are_discarded(self, synchronizer):
        synchronizer.sync(make_disasters(5), make_resources(5))
        markers = synchronizer.sync(make_disasters(1), [])
        assert [m.id for m in markers] == ["d0"]

    def test_state_returns_to_idle(self, synchronizer):
        synchronizer.sync(make_disasters(2), [])
        assert synchronizer.state == IDLE

    def test_sync_during_rebuild_is_queued(self):
        synchronizer = None

        class ReentrantGeocoder(SyntheticGeocoder):
            """Pushes a new input batch while the first rebuild is running."""
            fired = False

            def assign(self, kind):
                if not self.fired:
                    self.fired = True
                    queued = synchronizer.sync(make_disasters(3), [])
                    assert len(queued) == 0
                return super().assign(kind)

        synchronizer = MarkerSynchronizer(geocoder=ReentrantGeocoder(np.random.default_rng(0)))
        markers = synchronizer.sync(make_disasters(1), [])

        assert len(markers) == 3
        assert synchronizer.rebuild_count == 2


class TestScenarios:

    def test_single_flood_default_style(self, synchronizer):
        markers = synchronizer.sync([{"id": "d1", "title": "Flood"}], [])
        assert len(markers) == 1
        flood = markers.disasters[0]
        assert flood.position == LayoutPosition(30, 25)
        assert not flood.style.highlighted
        assert flood.style.background == "#ef4444"
        assert flood.sublabel == "Unknown location"

    def test_single_flood_selected(self, synchronizer):
        flood = {"id": "d1", "title": "Flood"}
        markers = synchronizer.sync([flood], [], selected=flood)
        marker = markers.disasters[0]
        assert marker.style.highlighted
        assert marker.style.background == "#dc2626"
        assert marker.style.z_index == 200

    def test_unknown_status_renders_available_color(self, synchronizer):
        resource = {"id": "r1", "name": "Depot", "type": "warehouse", "availability_status": "unknown_value"}
        markers = synchronizer.sync([], [resource])
        marker = markers.resources[0]
        assert marker.style.background == "#10b981"
        assert marker.icon == "📍"

    def test_marker_carries_source_record(self, synchronizer):
        markers = synchronizer.sync(make_disasters(1), make_resources(1))
        assert markers.disasters[0].record == DisasterRecord(id="d0", title="Disaster 0")
        assert isinstance(markers.resources[0].record, ResourceRecord)
        assert markers.resources[0].marker.description == "shelter"


class TestFailedRebuild:

    def test_queued_inputs_are_dropped_when_rebuild_fails(self):
        synchronizer = None

        class BrokenGeocoder(SyntheticGeocoder):
            """Queues a second batch, then fails the running rebuild."""
            def assign(self, kind):
                synchronizer.sync(make_disasters(4), [])
                raise RuntimeError("geocoder offline")

        synchronizer = MarkerSynchronizer(geocoder=BrokenGeocoder(np.random.default_rng(0)))
        with pytest.raises(RuntimeError):
            synchronizer.sync(make_disasters(1), [])

        assert synchronizer._pending is None
        assert synchronizer.state == IDLE
        assert synchronizer.rebuild_count == 0

    def test_next_sync_after_failure_rebuilds(self):
        calls = {"n": 0}

        class FlakyGeocoder(SyntheticGeocoder):
            def assign(self, kind):
                calls["n"] += 1
                if calls["n"] == 1:
                    raise RuntimeError("first draw fails")
                return super().assign(kind)

        synchronizer = MarkerSynchronizer(geocoder=FlakyGeocoder(np.random.default_rng(0)))
        with pytest.raises(RuntimeError):
            synchronizer.sync(make_disasters(2), [])

        markers = synchronizer.sync(make_disasters(2), [])
        assert len(markers) == 2


class TestSourceObjects:

    def test_markers_keep_host_objects(self, synchronizer):
        disaster = {"id": "d1", "title": "Flood", "severity": "high"}
        resource = {"id": "r1", "name": "Shelter", "capacity": 80}
        markers = synchronizer.sync([disaster], [resource])
        assert markers.disasters[0].source is disaster
        assert markers.resources[0].source is resource

    def test_change_in_extra_field_rebuilds(self, synchronizer):
        synchronizer.sync([{"id": "d1", "title": "Flood", "severity": "low"}], [])
        updated = {"id": "d1", "title": "Flood", "severity": "high"}
        markers = synchronizer.sync([updated], [])
        assert synchronizer.rebuild_count == 2
        assert markers.disasters[0].source is updated
