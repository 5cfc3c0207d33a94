import datetime
import typing

import typer

import rupin.constants
import rupin.dist
import rupin.logging
import rupin.recommend
import rupin.report
import rupin.resolver
import rupin.toolchain

app = typer.Typer()


def _load_snapshot():
    try:
        return rupin.toolchain.load_toolchain_snapshot()
    except rupin.toolchain.ToolchainError as e:
        rupin.logging.error("error: %s", e)
        raise typer.Exit(code=2) from e


@app.command()
def check(
    date: typing.Annotated[
        datetime.datetime | None,
        typer.Option(formats=["%Y-%m-%d"], help="Start searching from this date instead of today"),
    ] = None,
    mode: typing.Annotated[
        rupin.resolver.ScanMode,
        typer.Option(help="Stop at the installed build, or look a fixed window back"),
    ] = rupin.resolver.ScanMode.NEAREST,
    window: typing.Annotated[
        int, typer.Option(min=1, help="Number of days to look back in nearest mode")
    ] = rupin.constants.default_lookback_days,
    parallel: typing.Annotated[int, typer.Option(help="Number of parallel fetches")] = 1,
    no_cache: typing.Annotated[
        bool, typer.Option("--no-cache", help="Always fetch descriptors from the server")
    ] = False,
):
    """
    Find the most recent build that has every installed component.
    """
    snapshot = _load_snapshot()
    print(rupin.report.describe_snapshot(snapshot))

    source: rupin.dist.ReleaseSource = rupin.dist.DistServer()
    if not no_cache:
        source = rupin.dist.CachedSource(source)

    recommendation = rupin.recommend.check(
        snapshot,
        source,
        start=date.date() if date is not None else None,
        policy=rupin.resolver.ScanPolicy(mode=mode, window=window),
        parallel=parallel,
    )

    if isinstance(recommendation, rupin.recommend.NoMatch):
        for line in rupin.report.describe_history(recommendation.history):
            rupin.logging.debug("%s", line)
        print(rupin.report.describe_recommendation(recommendation))
        raise typer.Exit(code=1)

    print(rupin.report.describe_recommendation(recommendation))


@app.command()
def show():
    """
    Show the installed toolchain and its components.
    """
    print(rupin.report.describe_snapshot(_load_snapshot()))


@app.command()
def clean():
    """
    Remove cached release descriptors.
    """
    rupin.dist.clean_cache()
    rupin.logging.info("Removed %s", rupin.constants.rupin_dist_cache_dir)


def main():
    app()
