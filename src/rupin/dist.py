import datetime
import pathlib
import shutil
import typing

import requests

import rupin.constants
import rupin.logging
import rupin.util
from rupin.models import manifest as manifest_models
from rupin.models import version as version_models

# Statuses the dist server returns for a date that has no descriptor
_NOT_FOUND_STATUSES = (403, 404)


class TransportError(RuntimeError):
    """
    Network failure or unexpected response while fetching a descriptor.
    """

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class ReleaseSource(typing.Protocol):
    def fetch(
        self, day: datetime.date, channel: version_models.Channel
    ) -> manifest_models.Manifest | None:
        """
        Return the descriptor published on day for channel, or None when nothing was published.
        """
        ...


def manifest_path(day: datetime.date, channel: version_models.Channel) -> str:
    return f"dist/{day.isoformat()}/channel-rust-{channel}.toml"


class DistServer:
    """
    Fetches daily release descriptors from a rustup dist server.
    """

    def __init__(
        self,
        base_url: str = rupin.constants.dist_server,
        timeout: float = rupin.constants.dist_timeout_seconds,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_text(self, day: datetime.date, channel: version_models.Channel) -> str | None:
        url = f"{self.base_url}/{manifest_path(day, channel)}"
        rupin.logging.debug("Fetching %s", url)

        try:
            res = requests.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(url, str(e)) from e

        if res.status_code in _NOT_FOUND_STATUSES:
            return None
        if not res.ok:
            raise TransportError(url, f"HTTP {res.status_code}")

        return res.text

    def fetch(
        self, day: datetime.date, channel: version_models.Channel
    ) -> manifest_models.Manifest | None:
        text = self.fetch_text(day, channel)
        if text is None:
            return None
        return manifest_models.load_manifest(text)


class CachedSource:
    """
    Keeps descriptors of settled dates on disk.

    Descriptors never change once published, but the most recent days may still gain one, so only
    successful fetches of dates before yesterday are stored.
    """

    def __init__(
        self,
        inner: DistServer,
        cache_dir: pathlib.Path = rupin.constants.rupin_dist_cache_dir,
        today: datetime.date | None = None,
    ):
        self.inner = inner
        self.cache_dir = cache_dir
        self.today = today if today is not None else datetime.date.today()

    def _is_settled(self, day: datetime.date) -> bool:
        return day < self.today - datetime.timedelta(days=1)

    def fetch(
        self, day: datetime.date, channel: version_models.Channel
    ) -> manifest_models.Manifest | None:
        cache_path = self.cache_dir / manifest_path(day, channel).removeprefix("dist/")

        if cache_path.is_file():
            try:
                manifest = manifest_models.load_manifest_file(cache_path)
                rupin.logging.debug("Using cached descriptor %s", cache_path)
                return manifest
            except (version_models.ParseError, UnicodeDecodeError):
                rupin.logging.warning("Discarding corrupted cached descriptor %s", cache_path)
                cache_path.unlink()

        text = self.inner.fetch_text(day, channel)
        if text is None:
            return None

        manifest = manifest_models.load_manifest(text)
        if self._is_settled(day):
            try:
                rupin.util.ensure_path(cache_path.parent)
                with cache_path.open("w", encoding="utf-8") as f:
                    _ = f.write(text)
            except OSError as e:
                rupin.logging.warning("Cannot cache descriptor at %s: %s", cache_path, e)

        return manifest


def clean_cache(cache_dir: pathlib.Path = rupin.constants.rupin_dist_cache_dir):
    if cache_dir.is_dir():
        shutil.rmtree(cache_dir)
