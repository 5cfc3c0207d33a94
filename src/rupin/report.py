import rupin.recommend
import rupin.resolver
from rupin.models import toolchain as toolchain_models


def describe_snapshot(snapshot: toolchain_models.ToolchainSnapshot) -> str:
    """
    Summary of the installed toolchain and its components.
    """
    names = snapshot.component_names
    match len(names):
        case 0:
            components_line = "With no components"
        case 1:
            components_line = f"With component: {names[0]}"
        case _:
            components_line = f"With components: {', '.join(names)}"

    return (
        f"Installed: {snapshot.channel}-{snapshot.target} {snapshot.version.version} "
        f"({snapshot.baseline_date.isoformat()})\n{components_line}"
    )


def describe_history(history: tuple[rupin.resolver.DayEvaluation, ...]) -> list[str]:
    lines: list[str] = []
    for day in history:
        match day.status:
            case rupin.resolver.DayStatus.INCOMPLETE:
                lines.append(
                    f"{day.date.isoformat()}: missing {', '.join(sorted(day.missing))}"
                )
            case rupin.resolver.DayStatus.FAILED:
                lines.append(f"{day.date.isoformat()}: {day.error}")
            case rupin.resolver.DayStatus.NOT_FOUND:
                lines.append(f"{day.date.isoformat()}: not published")
    return lines


def describe_recommendation(recommendation: rupin.recommend.Recommendation) -> str:
    match recommendation:
        case rupin.recommend.UpToDate():
            return "Installed version is up to date"
        case rupin.recommend.Update(date=date, updates=updates):
            lines = [f'Use: "rustup update" (new version from {date.isoformat()})']
            lines.extend(f"     {update}" for update in updates)
            return "\n".join(lines)
        case rupin.recommend.Pin(components=components):
            lines = [f'Use: "rustup default {recommendation.toolchain}"']
            if len(components) > 0:
                lines.append(f'     "rustup component add {" ".join(components)}"')
            return "\n".join(lines)
        case rupin.recommend.NoMatch():
            return "error: no found version with all components"
    raise NotImplementedError(f"Unknown recommendation {recommendation!r}")
