import pytest

from models_canonical import Season
from webapp.services.document_store import DocumentStore
from webapp.services.errors import NotFoundError
from webapp.services.season_context import SeasonContext
from webapp.services.subscription_hub import SubscriptionHub

S1 = Season(id="s1", name="Season 1", data_source="legacy-fixed")
S2 = Season(id="s2", name="Season 2", is_active=True)
S3 = Season(id="s3", name="Season 3")


def test_defaults_to_active_and_persists():
    storage = {}
    ctx = SeasonContext(storage)
    assert ctx.is_loading

    ctx.on_seasons([S1, S2])

    assert not ctx.is_loading
    assert ctx.selected_season_id == "s2"
    assert storage == {"seasonId": "s2"}


def test_falls_back_to_first_season_without_active():
    ctx = SeasonContext({}, is_admin=True)
    ctx.on_seasons([S3, S1])
    assert ctx.selected_season_id == "s3"


def test_keeps_valid_stored_selection_for_admin():
    storage = {"seasonId": "s1"}
    ctx = SeasonContext(storage, is_admin=True)
    ctx.on_seasons([S1, S2])
    assert ctx.selected_season.name == "Season 1"


def test_stale_stored_selection_is_replaced():
    storage = {"seasonId": "gone"}
    ctx = SeasonContext(storage, is_admin=True)
    ctx.on_seasons([S1, S2])
    assert storage["seasonId"] == "s2"


def test_non_admin_is_pinned_to_active():
    storage = {"seasonId": "s1"}
    ctx = SeasonContext(storage)
    ctx.on_seasons([S1, S2])
    assert ctx.selected_season_id == "s2"

    ctx.select_season("s1")
    assert ctx.selected_season_id == "s2"

    # active season changes: the pin follows it
    ctx.on_seasons([S1, Season(id="s2", name="Season 2"), Season(id="s3", is_active=True)])
    assert storage["seasonId"] == "s3"


def test_admin_can_select_and_losing_admin_repins():
    storage = {}
    ctx = SeasonContext(storage, is_admin=True)
    ctx.on_seasons([S1, S2])
    ctx.select_season("s1")
    ctx.select_season("s1")
    assert ctx.selected_season_id == "s1"

    ctx.set_admin(False)
    assert ctx.selected_season_id == "s2"


def test_unknown_season_is_rejected():
    ctx = SeasonContext({}, is_admin=True)
    ctx.on_seasons([S1, S2])
    with pytest.raises(NotFoundError):
        ctx.select_season("s9")


def test_empty_season_list_selects_nothing():
    storage = {"seasonId": "s2"}
    ctx = SeasonContext(storage)
    ctx.on_seasons([])
    assert ctx.selected_season_id is None
    assert ctx.selected_season is None


def test_bind_follows_live_seasons():
    store = DocumentStore.from_url("sqlite://")
    hub = SubscriptionHub(store)
    try:
        storage = {}
        ctx = SeasonContext(storage)
        stop = ctx.bind(hub)
        assert ctx.selected_season_id is None

        store.set("seasons", "s2", {"name": "Season 2", "isActive": True})
        assert storage["seasonId"] == "s2"
        stop()
    finally:
        hub.close()
        store.close()
