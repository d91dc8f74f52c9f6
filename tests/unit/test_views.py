"""
Unit tests for detail/list views: initial load, reload on change notification,
teardown of subscriptions and stale responses.
"""
import asyncio

import pytest

from adapters.entities import building_service, info_service
from core.domain.models import Building
from core.services.dialog import EntityDialog
from core.services.routing import ActivatedRoute
from core.services.views import EntityDetailView, EntityListView

API_URL = "http://test/api"


@pytest.fixture
def buildings(server):
    return building_service(server, API_URL)


class TestDetailView:
    def test_loads_entity_from_route_id(self, server, events):
        server.seed("infos", {"id": 123, "value": "21.5"})
        infos = info_service(server, API_URL)
        route = ActivatedRoute({"id": "123"})

        async def scenario():
            view = EntityDetailView(infos, events, route)
            view.activate()
            await view.pending()
            return view

        view = asyncio.run(scenario())
        assert server.requests[-1][:2] == ("GET", f"{API_URL}/infos/123")
        assert view.entity.id == 123
        assert view.entity.value == "21.5"

    def test_reloads_on_change_notification(self, server, events):
        server.seed("infos", {"id": 1, "value": "old"})
        infos = info_service(server, API_URL)

        async def scenario():
            view = EntityDetailView(infos, events, ActivatedRoute({"id": 1}))
            view.activate()
            await view.pending()
            server.collections["infos"][1]["value"] = "new"
            events.broadcast("infoListModification", "OK")
            await view.pending()
            return view

        view = asyncio.run(scenario())
        assert view.entity.value == "new"
        assert [r[0] for r in server.requests] == ["GET", "GET"]

    def test_deactivate_releases_both_subscriptions(self, server, buildings, events):
        server.seed("buildings", {"id": 1, "title": "A"})
        route = ActivatedRoute({"id": 1})

        async def scenario():
            view = EntityDetailView(buildings, events, route)
            view.activate()
            await view.pending()
            assert route.observer_count == 1
            assert events.subscriber_count("buildingListModification") == 1
            view.deactivate()
            events.broadcast("buildingListModification", "OK")
            await view.pending()
            return view

        asyncio.run(scenario())
        assert route.observer_count == 0
        assert events.subscriber_count("buildingListModification") == 0
        assert len(server.requests) == 1

    def test_response_after_deactivate_is_dropped(self, server, buildings, events):
        server.seed("buildings", {"id": 1, "title": "A"})
        original = server.request

        async def scenario():
            release = asyncio.Event()

            async def slow_request(*args, **kwargs):
                await release.wait()
                return await original(*args, **kwargs)

            server.request = slow_request
            view = EntityDetailView(buildings, events, ActivatedRoute({"id": 1}))
            view.activate()
            await asyncio.sleep(0)
            view.deactivate()
            release.set()
            await view.pending()
            return view

        view = asyncio.run(scenario())
        assert view.entity is None

    def test_late_response_for_previous_route_id_is_dropped(self, server, buildings, events):
        server.seed("buildings", {"id": 1, "title": "one"}, {"id": 2, "title": "two"})
        route = ActivatedRoute({"id": "1"})
        original = server.request

        async def scenario():
            release = asyncio.Event()

            async def first_is_slow(method, url, **kwargs):
                if url.endswith("/buildings/1"):
                    await release.wait()
                return await original(method, url, **kwargs)

            server.request = first_is_slow
            view = EntityDetailView(buildings, events, route)
            view.activate()
            await asyncio.sleep(0)
            route.navigate({"id": "2"})
            await asyncio.sleep(0)
            release.set()
            await view.pending()
            view.deactivate()
            return view

        view = asyncio.run(scenario())
        assert view.entity.id == 2
        assert view.entity.title == "two"

class TestListView:
    def test_dialog_save_reloads_subscribed_list(self, server, buildings, events):
        server.next_id = 123

        async def scenario():
            view = EntityListView(buildings, events)
            view.activate()
            await view.pending()
            assert view.items == []

            dialog = EntityDialog(buildings, events)
            await dialog.open()
            dialog.edit(title="Hall A")
            saved = await dialog.save()
            await view.pending()
            view.deactivate()
            return view, saved

        view, saved = asyncio.run(scenario())
        assert saved == Building(id=123, title="Hall A")
        assert [b.id for b in view.items] == [123]
        assert view.total_items == 1

    def test_sends_page_size_and_sort(self, server, buildings, events):
        async def scenario():
            view = EntityListView(buildings, events, items_per_page=5, predicate="title", ascending=False)
            view.activate()
            await view.pending()
            view.deactivate()

        asyncio.run(scenario())
        assert server.requests[-1][3] == [
            ("page", "0"),
            ("size", "5"),
            ("sort", "title,desc"),
            ("sort", "id"),
        ]

    def test_load_page_and_total(self, server, buildings, events):
        server.seed("buildings", *({"id": i, "title": f"B{i}"} for i in range(1, 8)))

        async def scenario():
            view = EntityListView(buildings, events, items_per_page=3)
            view.activate()
            await view.pending()
            await view.load_page(2)
            view.deactivate()
            return view

        view = asyncio.run(scenario())
        assert [b.id for b in view.items] == [7]
        assert view.total_items == 7
        assert view.page == 2

    def test_search_then_clear(self, server, buildings, events):
        server.seed("buildings", {"id": 1, "title": "Hall A"}, {"id": 2, "title": "Gym"})

        async def scenario():
            view = EntityListView(buildings, events)
            view.activate()
            await view.pending()
            found = [b.id for b in await view.search("gym")]
            urls = [server.requests[-1][1]]
            reset = [b.id for b in await view.clear_search()]
            urls.append(server.requests[-1][1])
            view.deactivate()
            return found, reset, urls

        found, reset, urls = asyncio.run(scenario())
        assert found == [2]
        assert reset == [1, 2]
        assert urls == [f"{API_URL}/_search/buildings", f"{API_URL}/buildings"]

    def test_sort_by_resets_page(self, server, buildings, events):
        async def scenario():
            view = EntityListView(buildings, events)
            view.activate()
            await view.pending()
            await view.load_page(3)
            await view.sort_by("title")
            view.deactivate()
            return view

        view = asyncio.run(scenario())
        assert view.page == 0
        assert ("sort", "title,asc") in server.requests[-1][3]

    def test_deactivated_list_ignores_notifications(self, server, buildings, events):
        async def scenario():
            view = EntityListView(buildings, events)
            view.activate()
            await view.pending()
            view.deactivate()
            events.broadcast("buildingListModification", "OK")
            await view.pending()

        asyncio.run(scenario())
        assert len(server.requests) == 1
        assert events.subscriber_count("buildingListModification") == 0

    def test_track_id(self):
        assert EntityListView.track_id(Building(id=4)) == 4

    def test_reload_started_before_search_cannot_overwrite_results(self, server, buildings, events):
        server.seed("buildings", {"id": 1, "title": "Hall A"}, {"id": 2, "title": "Gym"})
        original = server.request

        async def scenario():
            view = EntityListView(buildings, events)
            view.activate()
            await view.pending()

            release = asyncio.Event()

            async def listing_is_slow(method, url, **kwargs):
                if url == f"{API_URL}/buildings":
                    await release.wait()
                return await original(method, url, **kwargs)

            server.request = listing_is_slow
            events.broadcast("buildingListModification", "OK")
            await asyncio.sleep(0)
            found = await view.search("gym")
            release.set()
            await view.pending()
            view.deactivate()
            return view, found

        view, found = asyncio.run(scenario())
        assert [b.id for b in found] == [2]
        assert [b.id for b in view.items] == [2]
        assert view.current_search == "gym"
