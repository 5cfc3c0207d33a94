import dataclasses
import datetime

import rupin.dist
import rupin.resolver
from rupin.models import toolchain as toolchain_models
from rupin.models import version as version_models

# Package whose version identifies a whole release
RELEASE_PACKAGE = "rust"


@dataclasses.dataclass(frozen=True)
class UpToDate:
    date: datetime.date


@dataclasses.dataclass(frozen=True)
class Update:
    date: datetime.date
    updates: tuple[toolchain_models.ComponentUpdate, ...]


@dataclasses.dataclass(frozen=True)
class Pin:
    date: datetime.date
    channel: version_models.Channel
    # Optional components to add on the pinned toolchain
    components: tuple[str, ...]

    @property
    def toolchain(self) -> str:
        return f"{self.channel}-{self.date.isoformat()}"


@dataclasses.dataclass(frozen=True)
class NoMatch:
    history: tuple[rupin.resolver.DayEvaluation, ...]


Recommendation = UpToDate | Update | Pin | NoMatch


def _is_installed_build(
    snapshot: toolchain_models.ToolchainSnapshot, found: rupin.resolver.Found
) -> bool:
    if found.date == snapshot.baseline_date:
        return True
    return found.manifest.pkg_version(RELEASE_PACKAGE) == snapshot.version


def recommend(
    snapshot: toolchain_models.ToolchainSnapshot, outcome: rupin.resolver.ScanOutcome
) -> Recommendation:
    """
    Turn a scan outcome into advice relative to the installed toolchain.
    """
    if isinstance(outcome, rupin.resolver.Exhausted):
        return NoMatch(history=outcome.history)

    if _is_installed_build(snapshot, outcome):
        return UpToDate(date=outcome.date)

    if outcome.date > snapshot.baseline_date:
        updates: list[toolchain_models.ComponentUpdate] = []
        for component in snapshot.components:
            if component.required:
                continue
            update = component.update_to(outcome.manifest.pkg_version(component.name))
            if update is not None:
                updates.append(update)
        return Update(date=outcome.date, updates=tuple(updates))

    return Pin(
        date=outcome.date,
        channel=snapshot.channel,
        components=tuple(snapshot.optional_components),
    )


def check(
    snapshot: toolchain_models.ToolchainSnapshot,
    source: rupin.dist.ReleaseSource,
    start: datetime.date | None = None,
    policy: rupin.resolver.ScanPolicy | None = None,
    parallel: int = 1,
) -> Recommendation:
    """
    Scan for the nearest complete build and recommend what to do about it.
    """
    if start is None:
        start = datetime.date.today()
    if policy is None:
        policy = rupin.resolver.ScanPolicy()

    outcome = rupin.resolver.resolve(source, snapshot, start, policy, parallel=parallel)
    return recommend(snapshot, outcome)
