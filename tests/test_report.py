import datetime

import pytest

import rupin.dist
import rupin.recommend
import rupin.report
import rupin.resolver
from rupin.models import toolchain as toolchain_models
from rupin.models import version as version_models


@pytest.mark.parametrize(
    "optional,expected_components_line",
    [
        ({}, "With components: rustc, cargo"),
        ({"clippy": None}, "With components: rustc, cargo, clippy"),
    ],
)
def test_describe_snapshot(helpers, optional, expected_components_line):
    snapshot = helpers.make_snapshot(optional=optional)

    assert rupin.report.describe_snapshot(snapshot) == (
        "Installed: nightly-x86_64-unknown-linux-gnu 1.33.0 (2018-12-31)\n"
        f"{expected_components_line}"
    )


@pytest.mark.parametrize(
    "names,expected_components_line",
    [
        ([], "With no components"),
        (["rustc"], "With component: rustc"),
    ],
)
def test_describe_snapshot_few_components(names, expected_components_line):
    snapshot = toolchain_models.ToolchainSnapshot(
        channel=version_models.Channel.STABLE,
        target="x86_64-apple-darwin",
        version=version_models.parse_version("1.31.1 (b6c32da9b 2018-12-18)"),
        components=tuple(toolchain_models.Component(name=name, required=True) for name in names),
    )

    assert rupin.report.describe_snapshot(snapshot) == (
        f"Installed: stable-x86_64-apple-darwin 1.31.1 (2018-12-18)\n{expected_components_line}"
    )


def test_describe_update():
    update = toolchain_models.ComponentUpdate(
        name="clippy",
        from_version=version_models.parse_version("0.0.212 (2ce6cdd 2018-12-30)"),
        to_version=version_models.parse_version("0.0.212 (1b89724 2019-01-15)"),
    )
    recommendation = rupin.recommend.Update(date=datetime.date(2019, 1, 16), updates=(update,))

    assert rupin.report.describe_recommendation(recommendation) == (
        'Use: "rustup update" (new version from 2019-01-16)\n'
        "     clippy - from 0.0.212 (2ce6cdd 2018-12-30) to 0.0.212 (1b89724 2019-01-15)"
    )


def test_describe_pin_without_components():
    recommendation = rupin.recommend.Pin(
        date=datetime.date(2019, 1, 5), channel=version_models.Channel.BETA, components=()
    )

    assert (
        rupin.report.describe_recommendation(recommendation)
        == 'Use: "rustup default beta-2019-01-05"'
    )


def test_describe_up_to_date():
    recommendation = rupin.recommend.UpToDate(date=datetime.date(2019, 1, 5))

    assert rupin.report.describe_recommendation(recommendation) == "Installed version is up to date"


def test_describe_history():
    history = (
        rupin.resolver.DayEvaluation(
            date=datetime.date(2019, 1, 3),
            status=rupin.resolver.DayStatus.INCOMPLETE,
            missing=frozenset({"rls", "clippy"}),
        ),
        rupin.resolver.DayEvaluation(
            date=datetime.date(2019, 1, 2), status=rupin.resolver.DayStatus.NOT_FOUND
        ),
        rupin.resolver.DayEvaluation(
            date=datetime.date(2019, 1, 1),
            status=rupin.resolver.DayStatus.FAILED,
            error=rupin.dist.TransportError("https://example.com/x.toml", "HTTP 500"),
        ),
    )

    assert rupin.report.describe_history(history) == [
        "2019-01-03: missing clippy, rls",
        "2019-01-02: not published",
        "2019-01-01: Failed to fetch https://example.com/x.toml: HTTP 500",
    ]
