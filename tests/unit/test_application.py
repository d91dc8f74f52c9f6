import asyncio

import pytest

from adapters.entities import BuildingService, NotificationService
from core.services.dialog import EntityDialog, PopupCoordinator
from core.services.routing import ActivatedRoute
from core.services.views import EntityDetailView, EntityListView


def test_services_share_transport_and_api_url(application, server):
    assert application.entity_names == [
        "building",
        "buildingDataDefinition",
        "info",
        "infoDefinition",
        "notification",
    ]
    assert isinstance(application.service("building"), BuildingService)
    assert isinstance(application.service("notification"), NotificationService)
    assert application.service("info").resource_url == "http://test/api/infos"


def test_unknown_entity(application):
    with pytest.raises(KeyError, match="unknown entity"):
        application.service("campus")


def test_components_share_one_event_bus(application):
    route = ActivatedRoute({})
    dialog = application.dialog("building")
    popup = application.popup("building", route)
    detail = application.detail_view("building", route)
    listing = application.list_view("building")

    assert isinstance(dialog, EntityDialog)
    assert isinstance(popup, PopupCoordinator)
    assert isinstance(detail, EntityDetailView)
    assert isinstance(listing, EntityListView)
    assert listing.items_per_page == application.settings.items_per_page
    assert dialog._events is application.events
    assert detail._events is application.events


def test_created_notification_reaches_other_view(application, server):
    server.next_id = 123

    async def scenario():
        listing = application.list_view("notification")
        listing.activate()
        await listing.pending()
        dialog = application.dialog("notification")
        await dialog.open()
        dialog.edit(title="Boiler check", type="CHECK")
        await dialog.save()
        await listing.pending()
        listing.deactivate()
        return listing

    listing = asyncio.run(scenario())
    assert [n.id for n in listing.items] == [123]
    assert listing.items[0].type.value == "CHECK"


def test_aclose_without_close_method(application):
    asyncio.run(application.aclose())
