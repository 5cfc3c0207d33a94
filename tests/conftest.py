import datetime
import pathlib
import typing

import pytest

from rupin.models import manifest as manifest_models
from rupin.models import toolchain as toolchain_models
from rupin.models import version as version_models

DATA_DIR = pathlib.Path(__file__).parent / "data"

TARGET = "x86_64-unknown-linux-gnu"

# Read eagerly so tests that use pyfakefs can still get at it
NEW_YEAR_MANIFEST_TEXT = (DATA_DIR / "channel-rust-nightly-2019-01-01.toml").read_text(
    encoding="utf-8"
)


class FakeSource:
    """
    Release source backed by a dict of date to descriptor. Exceptions stored as values are raised.
    """

    def __init__(
        self, manifests: dict[datetime.date, manifest_models.Manifest | Exception]
    ) -> None:
        self.manifests = manifests
        self.fetched: list[datetime.date] = []

    def fetch(
        self, day: datetime.date, channel: version_models.Channel
    ) -> manifest_models.Manifest | None:
        self.fetched.append(day)
        manifest = self.manifests.get(day)
        if isinstance(manifest, Exception):
            raise manifest
        return manifest


class Helpers:
    @staticmethod
    def make_manifest(
        date: datetime.date,
        available: dict[str, bool],
        target: str = TARGET,
        versions: dict[str, str] | None = None,
        renames: dict[str, str] | None = None,
    ) -> manifest_models.Manifest:
        if versions is None:
            versions = {}
        if renames is None:
            renames = {}

        manifest_dict: dict[str, typing.Any] = {
            "manifest-version": "2",
            "date": date.isoformat(),
            "pkg": {
                name: {
                    "version": versions.get(name, ""),
                    "target": {target: {"available": is_available}},
                }
                for name, is_available in available.items()
            },
            "renames": {alias: {"to": to} for alias, to in renames.items()},
        }
        return manifest_models.Manifest.model_validate(manifest_dict)

    @staticmethod
    def make_snapshot(
        version: str = "1.33.0-nightly (9eac38634 2018-12-31)",
        optional: dict[str, str | None] | None = None,
        target: str = TARGET,
    ) -> toolchain_models.ToolchainSnapshot:
        if optional is None:
            optional = {"clippy": None}

        components = [
            toolchain_models.Component(name="rustc", required=True),
            toolchain_models.Component(name="cargo", required=True),
        ]
        for name, component_version in optional.items():
            components.append(
                toolchain_models.Component(
                    name=name,
                    required=False,
                    version=version_models.parse_version(component_version)
                    if component_version is not None
                    else None,
                )
            )

        parsed_version = version_models.parse_version(version)
        return toolchain_models.ToolchainSnapshot(
            channel=parsed_version.channel,
            target=target,
            version=parsed_version,
            components=tuple(components),
            toolchain=f"{parsed_version.channel}-{target}",
        )


@pytest.fixture(name="helpers")
def helpers_fixture() -> Helpers:
    return Helpers()


@pytest.fixture(name="new_year_manifest_text")
def new_year_manifest_text_fixture() -> str:
    return NEW_YEAR_MANIFEST_TEXT


class MockHttpResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content: bytes = content
        self.status_code: int = status_code
        self.ok: bool = status_code < 400

    @property
    def text(self):
        return self.content.decode("utf-8")


@pytest.fixture(name="mock_http_response")
def mock_http_response_fixture() -> type[MockHttpResponse]:
    return MockHttpResponse


@pytest.fixture(name="fake_source")
def fake_source_fixture() -> type[FakeSource]:
    return FakeSource
