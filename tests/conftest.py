"""
Shared fixtures for the page build tests.

Replaces requests.get / requests.head with a URL-keyed fake so every test
runs offline against known upstream payloads.
"""

import json
from pathlib import Path

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from pagegen.config import SiteConfig

CENTROIDS_URL = "https://api.test/projects_centroid.geojson"
GEOMETRIES_URL = "https://api.test/projects_geom.geojson"
HISTORY_TEMPLATE = "https://api.test/history/history_{project_id}.csv"


class FakeResponse:
    """Minimal requests.Response stand-in with the attributes we use."""

    def __init__(self, status=200, body=b"", headers=None):
        self.status_code = status
        self.content = body if isinstance(body, bytes) else body.encode("utf-8")
        self.headers = CaseInsensitiveDict(headers or {})

    @property
    def ok(self):
        return self.status_code < 400

    @property
    def text(self):
        return self.content.decode("utf-8")

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeHttp:
    """URL -> FakeResponse (or exception) routing for GET and HEAD."""

    def __init__(self):
        self.get_routes = {}
        self.head_routes = {}
        self.calls = []

    def _dispatch(self, routes, method, url, kwargs):
        self.calls.append((method, url, kwargs))
        if url not in routes:
            return FakeResponse(status=404)
        route = routes[url]
        if callable(route):
            route = route()
        if isinstance(route, Exception):
            raise route
        return route

    def get(self, url, **kwargs):
        return self._dispatch(self.get_routes, "GET", url, kwargs)

    def head(self, url, **kwargs):
        return self._dispatch(self.head_routes, "HEAD", url, kwargs)

    def calls_to(self, method):
        return [url for m, url, _ in self.calls if m == method]


def feature(props, geometry=None):
    return {"type": "Feature", "properties": props, "geometry": geometry}


def square(x=0.0, y=0.0):
    return {
        "type": "Polygon",
        "coordinates": [[[x, y], [x + 1, y], [x + 1, y + 1], [x, y + 1], [x, y]]],
    }


@pytest.fixture
def fake_http(monkeypatch):
    http = FakeHttp()
    monkeypatch.setattr(requests, "get", http.get)
    monkeypatch.setattr(requests, "head", http.head)
    return http


@pytest.fixture
def centroid_features():
    return [
        feature({
            "project_id": "-NAlpha",
            "name": "Mapping Alpha Valley",
            "status": "active",
            "progress": 0.4567,
            "area_sqkm": 12.3,
            "number_of_users": 42,
            "project_details": "---\ntitle: alpha\n---\n# Alpha\\nHelp us map buildings.",
        }, geometry={"type": "Point", "coordinates": [85.3, 27.7]}),
        feature({
            "project_id": "-NBeta",
            "name": "Beta Floods",
            "status": "finished",
            "progress": None,
            "area_sqkm": None,
            "number_of_users": None,
            "project_details": "Plain *description*.",
        }, geometry={"type": "Point", "coordinates": [30.1, -1.9]}),
    ]


@pytest.fixture
def geometry_features():
    return [feature({"project_id": "-NAlpha"}, geometry=square())]


@pytest.fixture
def site_config(tmp_path):
    locales_dir = tmp_path / "locales"
    (locales_dir / "en").mkdir(parents=True)
    (locales_dir / "de").mkdir(parents=True)
    (locales_dir / "en" / "project.yaml").write_text(
        'project-progress-text: "Progress: {{progress}}%"\n'
        "download-unavailable-text: Not available\n"
    )
    (locales_dir / "en" / "common.yaml").write_text("home-link: Home\n")
    (locales_dir / "de" / "project.yaml").write_text(
        'project-progress-text: "Fortschritt: {{progress}} %"\n'
    )
    return SiteConfig(
        title="Test Site",
        locales=("en", "de"),
        default_locale="en",
        locales_dir=locales_dir,
        centroids_url=CENTROIDS_URL,
        geometries_url=GEOMETRIES_URL,
        history_url_template=HISTORY_TEMPLATE,
        timeout=5,
        probe_timeout=5,
    )


@pytest.fixture
def upstream(fake_http, centroid_features, geometry_features):
    """Fake API with the sample catalogue, geometries and Alpha's history."""
    fake_http.get_routes[CENTROIDS_URL] = FakeResponse(
        body=json.dumps({"type": "FeatureCollection", "features": centroid_features}))
    fake_http.get_routes[GEOMETRIES_URL] = FakeResponse(
        body=json.dumps({"type": "FeatureCollection", "features": geometry_features}))
    fake_http.get_routes[HISTORY_TEMPLATE.format(project_id="-NAlpha")] = FakeResponse(
        body="day,number_of_results\n2023-01-01,10\n2023-01-02,25\n")
    return fake_http


@pytest.fixture
def dist_dir(tmp_path) -> Path:
    return tmp_path / "dist"
