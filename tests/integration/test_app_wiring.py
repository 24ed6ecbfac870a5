"""End-to-end request flows through create_app() and the real lifespan.

Upstream services (OMDb, Jackett, Real-Debrid) are mocked with respx;
everything in between is the production wiring.
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
import respx
from fastapi.testclient import TestClient

from debridify.infrastructure.config.schema import AppConfig
from debridify.interfaces.app import create_app

pytestmark = pytest.mark.integration

_OMDB = "https://omdb.test/"
_JACKETT = "http://jackett.test/api/v2.0"
_RD = "https://rd.test/rest/1.0"

_MAGNET = "magnet:?xt=urn:btih:0123456789abcdef0123456789abcdef01234567&dn=Iron.Man"

_FEED = """<rss><channel>
<item>
  <title>Iron.Man.2008.1080p.BluRay</title>
  <guid>magnet:?xt=urn:btih:1111</guid>
  <jackettindexer id="yts">YTS</jackettindexer>
  <size>2147483648</size>
</item>
<item>
  <title>Iron.Man.2008.2160p.UHD</title>
  <guid>magnet:?xt=urn:btih:2222</guid>
  <jackettindexer id="1337x">1337x</jackettindexer>
  <size>8589934592</size>
</item>
</channel></rss>"""


@pytest.fixture()
def public_dir(tmp_path: Path) -> Path:
    for name in ("being_cached_message.mp4", "something_went_wrong.mp4"):
        (tmp_path / name).write_bytes(b"\x00\x00\x00\x18ftypmp42")
    return tmp_path


@pytest.fixture()
def config(public_dir: Path) -> AppConfig:
    return AppConfig.model_validate(
        {
            "server": {"public_dir": str(public_dir)},
            "omdb": {"url": _OMDB, "api_key": "omdb-key"},
            "jackett": {"url": _JACKETT, "api_key": "jackett-key"},
            "realdebrid": {"url": _RD, "api_key": "rd-key"},
            "http": {"retry_max_attempts": 0},
        }
    )


@pytest.fixture()
def client(config: AppConfig) -> Iterator[TestClient]:
    with TestClient(create_app(config), follow_redirects=False) as test_client:
        yield test_client


class TestHealth:
    def test_healthz(self, client: TestClient) -> None:
        assert client.get("/healthz").json() == {"status": "ok"}

    def test_manifest(self, client: TestClient) -> None:
        assert client.get("/manifest.json").json()["idPrefixes"] == ["tt"]


class TestMovieStreams:
    def test_ranked_streams(
        self, client: TestClient, respx_mock: respx.MockRouter
    ) -> None:
        respx_mock.get(_OMDB).respond(
            json={
                "Title": "Iron Man",
                "Year": "2008",
                "Type": "movie",
                "Country": "United States",
                "Genre": "Action",
                "Response": "True",
            }
        )
        jackett = respx_mock.get(f"{_JACKETT}/indexers/all/results/torznab").respond(
            text=_FEED
        )

        resp = client.get("/stream/movie/tt0371746.json")

        streams = resp.json()["streams"]
        assert [s["name"] for s in streams] == ["Debridify (4K)", "Debridify (1080p)"]
        assert streams[0]["url"] == (
            "http://testserver/resolve?magnet=magnet%3A%3Fxt%3Durn%3Abtih%3A2222"
        )
        params = jackett.calls.last.request.url.params
        assert params["t"] == "movie"
        assert params["imdbid"] == "tt0371746"

    def test_jackett_down_yields_empty(
        self, client: TestClient, respx_mock: respx.MockRouter
    ) -> None:
        respx_mock.get(_OMDB).respond(
            json={"Title": "Iron Man", "Type": "movie", "Response": "True"}
        )
        respx_mock.get(f"{_JACKETT}/indexers/all/results/torznab").respond(502)

        resp = client.get("/stream/movie/tt0371746.json")

        assert resp.status_code == 200
        assert resp.json() == {"streams": []}


class TestResolveFlow:
    def test_resolves_then_serves_from_cache(
        self, client: TestClient, respx_mock: respx.MockRouter
    ) -> None:
        respx_mock.get(f"{_RD}/torrents").respond(json=[])
        add = respx_mock.post(f"{_RD}/torrents/addMagnet").respond(
            201, json={"id": "T1"}
        )
        respx_mock.post(f"{_RD}/torrents/selectFiles/T1").respond(204)
        respx_mock.get(f"{_RD}/torrents/info/T1").respond(
            json={
                "id": "T1",
                "hash": "0123456789abcdef0123456789abcdef01234567",
                "status": "downloaded",
                "links": ["https://real-debrid.com/d/AAA"],
            }
        )
        respx_mock.post(f"{_RD}/unrestrict/link").respond(
            json={
                "download": "https://dl.rd.test/AAA/Iron.Man.mkv",
                "filename": "Iron.Man.mkv",
                "mimeType": "video/x-matroska",
                "filesize": 1_503_238_554,
            }
        )

        first = client.get("/resolve", params={"magnet": _MAGNET})
        second = client.get("/resolve", params={"magnet": _MAGNET})

        assert first.status_code == 302
        assert first.headers["location"] == "https://dl.rd.test/AAA/Iron.Man.mkv"
        assert second.headers["location"] == "https://dl.rd.test/AAA/Iron.Man.mkv"
        assert add.call_count == 1

    def test_uncached_torrent_gets_placeholder(
        self, client: TestClient, respx_mock: respx.MockRouter
    ) -> None:
        respx_mock.get(f"{_RD}/torrents").respond(
            json=[
                {
                    "id": "T9",
                    "hash": "0123456789ABCDEF0123456789ABCDEF01234567",
                    "status": "downloading",
                    "links": [],
                }
            ]
        )
        add = respx_mock.post(f"{_RD}/torrents/addMagnet")
        respx_mock.get(f"{_RD}/torrents/info/T9").respond(
            json={"id": "T9", "status": "downloading", "links": []}
        )

        resp = client.get("/resolve", params={"magnet": _MAGNET})

        assert resp.status_code == 302
        assert resp.headers["location"] == (
            "http://testserver/public/being_cached_message.mp4"
        )
        assert not add.called

    def test_missing_magnet(self, client: TestClient) -> None:
        resp = client.get("/resolve")
        assert resp.headers["location"] == (
            "http://testserver/public/something_went_wrong.mp4"
        )

    def test_placeholder_is_served(self, client: TestClient) -> None:
        resp = client.get("/public/something_went_wrong.mp4")
        assert resp.status_code == 200


class TestMissingPlaceholders:
    @pytest.fixture()
    def client(self, config: AppConfig, tmp_path: Path) -> Iterator[TestClient]:
        empty = tmp_path / "empty"
        empty.mkdir()
        config = config.model_copy(
            update={"server": config.server.model_copy(update={"public_dir": empty})}
        )
        with TestClient(create_app(config), follow_redirects=False) as test_client:
            yield test_client

    def test_pending_without_video_asks_to_retry(
        self, client: TestClient, respx_mock: respx.MockRouter
    ) -> None:
        respx_mock.get(f"{_RD}/torrents").respond(json=[])
        respx_mock.post(f"{_RD}/torrents/addMagnet").respond(201, json={"id": "T9"})
        respx_mock.post(f"{_RD}/torrents/selectFiles/T9").respond(204)
        respx_mock.get(f"{_RD}/torrents/info/T9").respond(
            json={"id": "T9", "status": "queued", "links": []}
        )

        resp = client.get("/resolve", params={"magnet": _MAGNET})

        assert resp.status_code == 503
        assert resp.headers["retry-after"] == "30"
        assert "location" not in resp.headers

    def test_missing_magnet_without_video(self, client: TestClient) -> None:
        resp = client.get("/resolve")
        assert resp.status_code == 400
        assert "location" not in resp.headers
