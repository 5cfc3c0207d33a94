import collections.abc
import concurrent.futures
import dataclasses
import datetime
import enum
import itertools

import rupin.constants
import rupin.dist
import rupin.logging
from rupin.models import manifest as manifest_models
from rupin.models import toolchain as toolchain_models
from rupin.models import version as version_models


class ScanMode(enum.Enum):
    # Stop at the installed build's commit date
    NEWER_ONLY = "newer"
    # Look a fixed window into the past regardless of what is installed
    NEAREST = "nearest"


@dataclasses.dataclass(frozen=True)
class ScanPolicy:
    mode: ScanMode = ScanMode.NEAREST
    window: int = rupin.constants.default_lookback_days

    def __post_init__(self):
        if self.window < 1:
            raise ValueError(f"Scan window must be at least one day, got {self.window}")


class DayStatus(enum.Enum):
    QUALIFIED = "qualified"
    INCOMPLETE = "incomplete"
    NOT_FOUND = "not-found"
    FAILED = "failed"


@dataclasses.dataclass(frozen=True)
class DayEvaluation:
    date: datetime.date
    status: DayStatus
    manifest: manifest_models.Manifest | None = None
    missing: frozenset[str] = frozenset()
    error: Exception | None = None


@dataclasses.dataclass(frozen=True)
class Found:
    date: datetime.date
    manifest: manifest_models.Manifest
    history: tuple[DayEvaluation, ...]

    @property
    def rejected(self) -> list[DayEvaluation]:
        return [day for day in self.history if day.status == DayStatus.INCOMPLETE]


@dataclasses.dataclass(frozen=True)
class Exhausted:
    history: tuple[DayEvaluation, ...]

    @property
    def rejected(self) -> list[DayEvaluation]:
        return [day for day in self.history if day.status == DayStatus.INCOMPLETE]


ScanOutcome = Found | Exhausted


def missing_components(
    snapshot: toolchain_models.ToolchainSnapshot, manifest: manifest_models.Manifest
) -> frozenset[str]:
    """
    Installed components that the descriptor does not make available for the local target.
    """
    return frozenset(
        name
        for name in snapshot.component_names
        if not manifest.is_available(name, snapshot.target)
    )


def candidate_dates(
    start: datetime.date, policy: ScanPolicy, baseline: datetime.date
) -> collections.abc.Iterator[datetime.date]:
    """
    Dates to evaluate, most recent first.
    """
    one_day = datetime.timedelta(days=1)

    if policy.mode == ScanMode.NEWER_ONLY:
        cursor = start
        while cursor >= baseline:
            yield cursor
            cursor -= one_day
    else:
        for offset in range(policy.window):
            yield start - offset * one_day


def evaluate_day(
    source: rupin.dist.ReleaseSource,
    snapshot: toolchain_models.ToolchainSnapshot,
    day: datetime.date,
) -> DayEvaluation:
    """
    Fetch the descriptor for day and check it against the installed components.
    """
    try:
        manifest = source.fetch(day, snapshot.channel)
    except (rupin.dist.TransportError, version_models.ParseError) as e:
        rupin.logging.warning("Skipping %s: %s", day, e)
        return DayEvaluation(date=day, status=DayStatus.FAILED, error=e)

    if manifest is None:
        rupin.logging.debug("No %s build published on %s", snapshot.channel, day)
        return DayEvaluation(date=day, status=DayStatus.NOT_FOUND)

    missing = missing_components(snapshot, manifest)
    if len(missing) > 0:
        rupin.logging.info(
            "Build on %s is missing components %s", day, ", ".join(sorted(missing))
        )
        return DayEvaluation(
            date=day, status=DayStatus.INCOMPLETE, manifest=manifest, missing=missing
        )

    rupin.logging.debug("Build on %s has all components", day)
    return DayEvaluation(date=day, status=DayStatus.QUALIFIED, manifest=manifest)


def scan(
    source: rupin.dist.ReleaseSource,
    snapshot: toolchain_models.ToolchainSnapshot,
    start: datetime.date,
    policy: ScanPolicy,
    parallel: int = 1,
) -> collections.abc.Iterator[DayEvaluation]:
    """
    Walk backwards from start, yielding each evaluated date until one qualifies.

    With parallel > 1, a batch of dates is fetched concurrently but evaluations are still yielded
    in date order, so the first qualifying date is the same as in a sequential scan.
    """
    dates = candidate_dates(start, policy, snapshot.baseline_date)

    if parallel <= 1:
        for day in dates:
            evaluation = evaluate_day(source, snapshot, day)
            yield evaluation
            if evaluation.status == DayStatus.QUALIFIED:
                return
        return

    with concurrent.futures.ThreadPoolExecutor(max_workers=parallel) as executor:
        for batch in itertools.batched(dates, parallel):
            # map yields in submission order regardless of completion order
            evaluations = executor.map(lambda day: evaluate_day(source, snapshot, day), batch)
            for evaluation in evaluations:
                yield evaluation
                if evaluation.status == DayStatus.QUALIFIED:
                    return


def resolve(
    source: rupin.dist.ReleaseSource,
    snapshot: toolchain_models.ToolchainSnapshot,
    start: datetime.date,
    policy: ScanPolicy,
    parallel: int = 1,
) -> ScanOutcome:
    """
    Find the nearest date to start whose build has every installed component.
    """
    rupin.logging.debug(
        "Scanning %s builds from %s (%s, window %d)",
        snapshot.channel,
        start,
        policy.mode.value,
        policy.window,
    )

    history: list[DayEvaluation] = []
    for evaluation in scan(source, snapshot, start, policy, parallel=parallel):
        history.append(evaluation)
        if evaluation.status == DayStatus.QUALIFIED:
            assert evaluation.manifest is not None
            return Found(
                date=evaluation.date, manifest=evaluation.manifest, history=tuple(history)
            )

    return Exhausted(history=tuple(history))
