"""
Base class for project page data sources.

Each remote dataset the page build reads from is a DataSource subclass in
the top-level sources/ directory:
  1. Subclass DataSource
  2. Implement fetch() to return a list of records from pagegen.models
  3. Raise SourceError when the remote data cannot be read

Whether a SourceError is fatal is decided by the caller: the project
catalogue is load-bearing for the whole build, geometry and history are
best-effort and degrade to empty collections.
"""

from __future__ import annotations

import abc
import logging
from typing import Any

import requests

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30
DEFAULT_USER_AGENT = "mapswipe-pages-build/1.0"


class SourceError(RuntimeError):
    """Remote data could not be fetched or did not have the expected shape."""


class DataSource(abc.ABC):
    """Abstract base class for a data source."""

    def __init__(self, url: str, timeout: float = DEFAULT_TIMEOUT,
                 user_agent: str = DEFAULT_USER_AGENT) -> None:
        self._url = url
        self.timeout = timeout
        self.user_agent = user_agent

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short identifier for this source, e.g. 'project_centroids'."""
        ...

    @property
    @abc.abstractmethod
    def description(self) -> str:
        """Human-readable description used in build logs."""
        ...

    @property
    def url(self) -> str:
        """Remote URL this source reads from."""
        return self._url

    @property
    def headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent}

    @abc.abstractmethod
    def fetch(self) -> list[Any]:
        """Fetch and return all records from this source.

        Raises SourceError if the source is unreachable or malformed.
        """
        ...

    def get(self, accept: str = "application/json") -> requests.Response:
        """GET self.url, raising SourceError on any transport or HTTP error."""
        headers = dict(self.headers)
        headers["Accept"] = accept
        try:
            resp = requests.get(self.url, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise SourceError(f"{self.name}: request to {self.url} failed: {exc}") from exc
        return resp

    def get_feature_collection(self) -> list[dict[str, Any]]:
        """GET self.url and return the features of a GeoJSON FeatureCollection."""
        resp = self.get(accept="application/geo+json, application/json")
        try:
            data = resp.json()
        except ValueError as exc:
            raise SourceError(f"{self.name}: {self.url} did not return JSON") from exc

        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            raise SourceError(f"{self.name}: {self.url} is not a feature collection")

        features = [f for f in data["features"] if isinstance(f, dict)]
        skipped = len(data["features"]) - len(features)
        if skipped:
            log.warning("%s: skipped %d non-object features", self.name, skipped)
        return features
