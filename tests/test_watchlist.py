import pytest

from slimelist.core.watchlist import (
    WatchList, next_state, clamp_episodes,
    Add, SetStatus, IncrementEpisodes, Update, Remove,
)
from slimelist.errors import InvalidTransition, StoreError
from slimelist.store import InMemoryListStore

from conftest import catalog_entry, list_entry


# ---------- next_state (pure) ----------
def test_last_episode_completes():
    cur = list_entry(episodes_watched=27, total_episodes=28, status="watching")
    nxt = next_state(cur, IncrementEpisodes(1))
    assert (nxt.episodes_watched, nxt.status) == (28, "completed")


def test_unknown_total_never_forces_completion():
    cur = list_entry(episodes_watched=0, total_episodes=0, status="watching")
    nxt = next_state(cur, IncrementEpisodes(1000))
    assert (nxt.episodes_watched, nxt.status) == (1000, "watching")


@pytest.mark.parametrize("status", ["watching", "dropped", "plan_to_watch"])
def test_completion_overrides_requested_status(status):
    cur = list_entry(episodes_watched=11, total_episodes=12)
    assert next_state(cur, IncrementEpisodes(1, status=status)).status == "completed"
    assert next_state(cur, Update(status, 12)).status == "completed"


@pytest.mark.parametrize("start,delta,expected", [
    (5, 100, 12), (5, -100, 0), (0, -1, 0), (12, 1, 12), (3, 2, 5), (12, 0, 12),
])
def test_episodes_stay_in_range(start, delta, expected):
    cur = list_entry(episodes_watched=start, total_episodes=12, status="watching")
    nxt = next_state(cur, IncrementEpisodes(delta))
    assert nxt.episodes_watched == expected
    assert 0 <= nxt.episodes_watched <= nxt.total_episodes


def test_below_total_keeps_requested_status():
    cur = list_entry(episodes_watched=1, total_episodes=12, status="watching")
    assert next_state(cur, IncrementEpisodes(1, status="dropped")).status == "dropped"
    assert next_state(cur, IncrementEpisodes(1)).status == "watching"


def test_decrement_from_completed_keeps_status():
    cur = list_entry(episodes_watched=12, total_episodes=12, status="completed")
    nxt = next_state(cur, IncrementEpisodes(-1))
    assert (nxt.episodes_watched, nxt.status) == (11, "completed")


def test_set_status_keeps_episodes_and_score():
    cur = list_entry(episodes_watched=12, total_episodes=12, status="completed", score=7)
    nxt = next_state(cur, SetStatus("watching"))
    assert (nxt.status, nxt.episodes_watched, nxt.score) == ("watching", 12, 7)


def test_update_is_one_full_state():
    cur = list_entry(episodes_watched=1, total_episodes=24, status="plan_to_watch")
    nxt = next_state(cur, Update("watching", 30, score=6), now="2030-01-01T00:00:00+00:00")
    assert (nxt.status, nxt.episodes_watched, nxt.score) == ("completed", 24, 6)
    assert nxt.updated_at == "2030-01-01T00:00:00+00:00"
    assert nxt.created_at == cur.created_at


def test_add_builds_entry_from_catalog():
    nxt = next_state(None, Add("u1", "plan_to_watch", catalog_entry(9, "Mushishi", 26)),
                     now="2030-01-01T00:00:00+00:00")
    assert nxt.key == ("u1", 9)
    assert nxt.title == "Mushishi"
    assert nxt.image_url == "https://cdn/9.jpg"
    assert (nxt.status, nxt.episodes_watched, nxt.total_episodes, nxt.score) == ("plan_to_watch", 0, 26, None)
    assert nxt.created_at == nxt.updated_at == "2030-01-01T00:00:00+00:00"


def test_add_over_existing_keeps_created_at_and_clamps():
    cur = list_entry(anime_id=9, created_at="2020-01-01T00:00:00+00:00")
    nxt = next_state(cur, Add("u1", "watching", catalog_entry(9, episode_count=12), episodes_watched=40))
    assert nxt.created_at == "2020-01-01T00:00:00+00:00"
    assert nxt.episodes_watched == 12
    assert nxt.status == "completed"


@pytest.mark.parametrize("status", ["watching", "plan_to_watch", "dropped"])
def test_add_at_last_episode_completes(status):
    nxt = next_state(None, Add("u1", status, catalog_entry(9, episode_count=12), episodes_watched=12))
    assert (nxt.episodes_watched, nxt.total_episodes, nxt.status) == (12, 12, "completed")


def test_add_below_total_keeps_chosen_status():
    nxt = next_state(None, Add("u1", "dropped", catalog_entry(9, episode_count=12), episodes_watched=11))
    assert nxt.status == "dropped"


def test_add_with_unknown_total_keeps_chosen_status():
    nxt = next_state(None, Add("u1", "watching", catalog_entry(9, episode_count=0), episodes_watched=500))
    assert (nxt.episodes_watched, nxt.status) == (500, "watching")


def test_remove_yields_none():
    assert next_state(list_entry(), Remove()) is None


@pytest.mark.parametrize("action", [SetStatus("watching"), IncrementEpisodes(1), Update("watching", 1), Remove()])
def test_only_add_leaves_not_in_list(action):
    with pytest.raises(InvalidTransition):
        next_state(None, action)


@pytest.mark.parametrize("action", [
    SetStatus("on_hold"), IncrementEpisodes(1, status="rewatching"),
    Update("watching", 1, score=0), Update("watching", 1, score=11),
])
def test_invalid_input_rejected(action):
    with pytest.raises(InvalidTransition):
        next_state(list_entry(), action)


def test_next_state_does_not_mutate_current():
    cur = list_entry(episodes_watched=3)
    next_state(cur, IncrementEpisodes(5))
    assert cur.episodes_watched == 3


def test_clamp_helper():
    assert clamp_episodes(-3, 0) == 0
    assert clamp_episodes(5000, 0) == 5000
    assert clamp_episodes(13, 12) == 12


# ---------- WatchList (committing) ----------
class SpyStore(InMemoryListStore):
    def __init__(self):
        super().__init__()
        self.writes = []

    def upsert(self, entry):
        self.writes.append("upsert")
        return super().upsert(entry)

    def update_progress(self, *a, **kw):
        self.writes.append("update_progress")
        return super().update_progress(*a, **kw)


class FailingStore(InMemoryListStore):
    def update_progress(self, *a, **kw):
        raise StoreError("backend unavailable")


@pytest.fixture
def store():
    return SpyStore()


@pytest.fixture
def wl(store):
    return WatchList(store, "u1")


def test_add_then_remove_round_trip(wl, store):
    wl.add(catalog_entry(1), "watching")
    before = store.list_all("u1")

    wl.add(catalog_entry(2), "plan_to_watch")
    wl.remove(2)
    assert store.list_all("u1") == before


def test_re_add_keeps_one_row(wl, store):
    wl.add(catalog_entry(1), "plan_to_watch")
    wl.add(catalog_entry(1), "watching", episodes_watched=3)
    wl.add(catalog_entry(1), "dropped")

    rows = store.list_all("u1")
    assert len(rows) == 1
    assert rows[0].status == "dropped"


def test_increment_to_completion_persists(wl, store):
    wl.add(catalog_entry(1, episode_count=28), "watching", episodes_watched=27)

    saved = wl.increment_episodes(1)
    assert (saved.status, saved.episodes_watched) == ("completed", 28)
    assert wl.get_status(1) == "completed"


def test_combined_action_is_a_single_write(wl, store):
    wl.add(catalog_entry(1), "plan_to_watch")
    store.writes.clear()

    wl.update(1, "watching", 4, score=8)
    wl.increment_episodes(1, 2, status="dropped")
    assert store.writes == ["update_progress", "update_progress"]
    row = store.get("u1", 1)
    assert (row.status, row.episodes_watched, row.score) == ("dropped", 6, 8)


def test_increment_keeps_score(wl):
    wl.add(catalog_entry(1), "watching", score=9)
    assert wl.increment_episodes(1).score == 9


def test_mutating_absent_title_fails(wl):
    with pytest.raises(InvalidTransition):
        wl.increment_episodes(404)
    with pytest.raises(InvalidTransition):
        wl.remove(404)


def test_store_failure_leaves_confirmed_state():
    store = FailingStore()
    wl = WatchList(store, "u1")
    confirmed = wl.add(catalog_entry(1), "watching", episodes_watched=2)

    with pytest.raises(StoreError):
        wl.increment_episodes(1)
    assert wl.get(1) == confirmed


def test_entries_and_filter(wl):
    wl.add(catalog_entry(1), "watching")
    wl.add(catalog_entry(2), "completed")
    wl.add(catalog_entry(3), "watching")

    assert {e.anime_id for e in wl.entries()} == {1, 2, 3}
    assert {e.anime_id for e in wl.entries("watching")} == {1, 3}
    with pytest.raises(InvalidTransition):
        wl.entries("bogus")


def test_get_status_absent(wl):
    assert wl.get_status(1) is None


def test_stats(wl):
    wl.add(catalog_entry(1, episode_count=28), "watching", episodes_watched=16)
    wl.add(catalog_entry(2, episode_count=0), "watching", episodes_watched=1037, score=9)
    wl.add(catalog_entry(3, episode_count=23), "completed", episodes_watched=23, score=8)
    wl.add(catalog_entry(4, episode_count=12), "plan_to_watch")

    s = wl.stats()
    assert s["totalAnime"] == 4
    assert s["totalEpisodes"] == 16 + 1037 + 23
    assert s["byStatus"] == {"watching": 2, "completed": 1, "plan_to_watch": 1, "dropped": 0}
    assert s["avgScore"] == 8.5


def test_stats_empty(wl):
    assert wl.stats() == {"totalAnime": 0, "totalEpisodes": 0,
                          "byStatus": {"watching": 0, "completed": 0, "plan_to_watch": 0, "dropped": 0},
                          "avgScore": 0.0}


def test_user_id_required(store):
    with pytest.raises(ValueError):
        WatchList(store, "")


def test_committed_row_carries_computed_timestamp(wl, store, monkeypatch):
    from slimelist.core import watchlist as wl_mod

    wl.add(catalog_entry(1), "watching")
    monkeypatch.setattr(wl_mod, "now_iso", lambda: "2031-05-05T00:00:00+00:00")

    saved = wl.increment_episodes(1)
    assert saved.updated_at == "2031-05-05T00:00:00+00:00"
    assert store.get("u1", 1).updated_at == "2031-05-05T00:00:00+00:00"
