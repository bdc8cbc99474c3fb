import pytest

from slimelist.models.types import ListEntry


class DummyResponse:
    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data or {}

    def json(self):
        return self._json


class FakeHTTP:
    """Stands in for requests.Session; serves scripted responses by path."""

    def __init__(self, routes=None, base="https://api.jikan.moe/v4"):
        self.routes = routes or {}
        self.base = base
        self.calls = []
        self.closed = False

    def request(self, method, url, timeout=None, headers=None, params=None, **kw):
        self.calls.append({"method": method, "url": url, "params": params})
        resp = self.routes.get(url[len(self.base):], DummyResponse(404))
        if isinstance(resp, list):
            return resp.pop(0) if len(resp) > 1 else resp[0]
        return resp

    def close(self):
        self.closed = True


def jikan_anime(mal_id=1, title="Cowboy Bebop", episodes=26, score=8.75, **extra):
    d = {
        "mal_id": mal_id,
        "url": f"https://myanimelist.net/anime/{mal_id}",
        "images": {"jpg": {"image_url": f"https://cdn/{mal_id}.jpg",
                           "large_image_url": f"https://cdn/{mal_id}l.jpg"}},
        "title": title,
        "title_english": title,
        "title_japanese": None,
        "type": "TV",
        "episodes": episodes,
        "status": "Finished Airing",
        "aired": {"from": "1998-04-03T00:00:00+00:00", "to": "1999-04-24T00:00:00+00:00",
                  "string": "Apr 3, 1998 to Apr 24, 1999"},
        "score": score,
        "synopsis": "Space bounty hunters.",
        "year": 1998,
        "studios": [{"mal_id": 14, "name": "Sunrise"}],
        "genres": [{"mal_id": 1, "name": "Action"}, {"mal_id": 24, "name": "Sci-Fi"}],
    }
    d.update(extra)
    return d


def catalog_entry(anime_id=1, title="Cowboy Bebop", episode_count=26):
    return {
        "id": anime_id,
        "title": title,
        "titleEnglish": None,
        "titleJapanese": None,
        "episodeCount": episode_count,
        "score": 0.0,
        "images": {"jpg": {"image_url": f"https://cdn/{anime_id}.jpg"}},
        "genres": [],
        "studios": [],
        "airedRange": {"start": None, "end": None, "label": None},
        "synopsis": "",
        "type": "TV",
        "status": None,
        "year": None,
        "url": None,
    }


def list_entry(**kw):
    base = dict(user_id="u1", anime_id=1, title="Cowboy Bebop", image_url="",
                status="watching", episodes_watched=0, total_episodes=26)
    base.update(kw)
    return ListEntry(**base)


@pytest.fixture
def fake_http():
    return FakeHTTP()
