import pathlib
import re

import rupin.constants
import rupin.logging
import rupin.process
from rupin.models import manifest as manifest_models
from rupin.models import toolchain as toolchain_models
from rupin.models import version as version_models

_ACTIVE_TOOLCHAIN_RE = re.compile(
    r"(?P<toolchain>(?P<channel>stable|beta|nightly)(?:-\d{4}-\d{2}-\d{2})?-(?P<target>[\w.-]+))"
)


class ToolchainError(RuntimeError):
    """
    The installed toolchain could not be determined.
    """


def parse_active_toolchain(text: str) -> tuple[str, version_models.Channel, str]:
    """
    Parse the output of `rustup show active-toolchain`.

    Returns the toolchain name, its channel and its target, e.g.
    "nightly-2019-01-01-x86_64-pc-windows-gnu (default)" gives
    ("nightly-2019-01-01-x86_64-pc-windows-gnu", NIGHTLY, "x86_64-pc-windows-gnu").
    """
    for line in text.splitlines():
        match = _ACTIVE_TOOLCHAIN_RE.match(line.strip())
        if match is not None:
            return (
                match["toolchain"],
                version_models.Channel.parse(match["channel"]),
                match["target"],
            )

    raise ToolchainError(f"Cannot determine active toolchain from {text!r}")


def parse_rustc_version(text: str) -> version_models.Version:
    """
    Parse the output of `rustc -V`.
    """
    prefix, _, raw_version = text.strip().partition(" ")
    if prefix != "rustc":
        raise ToolchainError(f"Unexpected rustc version output {text!r}")

    try:
        return version_models.parse_version(raw_version)
    except version_models.ParseError as e:
        raise ToolchainError(f"Cannot parse rustc version: {e}") from e


def parse_installed_components(text: str, target: str) -> list[tuple[str, bool]]:
    """
    Parse the output of `rustup component list` into (name, required) pairs.

    "(default)" marks the components rustup always installs. Packages installed for other
    targets, such as "rust-std-wasm32-unknown-unknown", are skipped: only host components
    decide whether a build is usable.
    """
    components: list[tuple[str, bool]] = []
    target_suffix = f"-{target}"

    for line in text.splitlines():
        line = line.strip()
        if line.endswith("(installed)"):
            marked_required = False
        elif line.endswith("(default)"):
            marked_required = True
        else:
            continue

        name = line.rsplit(" ", 1)[0].strip()
        if name.endswith(target_suffix):
            name = name.removesuffix(target_suffix)
        elif name.startswith(rupin.constants.cross_target_packages):
            rupin.logging.debug("Skipping %s installed for another target", name)
            continue

        required = marked_required or name in rupin.constants.required_components
        components.append((name, required))

    return components


def bundled_manifest_path(toolchain: str) -> pathlib.Path:
    return (
        rupin.constants.rustup_home
        / "toolchains"
        / toolchain
        / "lib"
        / "rustlib"
        / rupin.constants.bundled_manifest_name
    )


def load_bundled_manifest(toolchain: str) -> manifest_models.Manifest | None:
    """
    Load the descriptor the installed toolchain was installed from, if rustup kept it.
    """
    path = bundled_manifest_path(toolchain)
    if not path.is_file():
        rupin.logging.debug("No bundled descriptor at %s", path)
        return None

    try:
        return manifest_models.load_manifest_file(path)
    except version_models.ParseError as e:
        rupin.logging.warning("Ignoring unreadable bundled descriptor %s: %s", path, e)
        return None


def load_toolchain_snapshot() -> toolchain_models.ToolchainSnapshot:
    """
    Capture the installed toolchain by querying rustup and rustc.
    """
    try:
        active_toolchain_output = rupin.process.run_command(["rustup", "show", "active-toolchain"])
        rustc_output = rupin.process.run_command(["rustc", "-V"])
        component_output = rupin.process.run_command(["rustup", "component", "list"])
    except rupin.process.CommandError as e:
        raise ToolchainError(str(e)) from e

    toolchain, channel, target = parse_active_toolchain(active_toolchain_output)
    version = parse_rustc_version(rustc_output)
    installed = parse_installed_components(component_output, target)

    bundled_manifest = load_bundled_manifest(toolchain)
    components = tuple(
        toolchain_models.Component(
            name=name,
            required=required,
            version=bundled_manifest.pkg_version(name) if bundled_manifest is not None else None,
        )
        for name, required in installed
    )

    return toolchain_models.ToolchainSnapshot(
        channel=channel,
        target=target,
        version=version,
        components=components,
        toolchain=toolchain,
    )
