import datetime
import pathlib
import tomllib

import pydantic

import rupin.logging
from rupin.models import version as version_models

# Platform-independent entry used when the requested target is absent
WILDCARD_TARGET = "*"


def _kebab_case(name: str) -> str:
    return name.replace("_", "-")


class _ManifestModel(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(
        alias_generator=_kebab_case, populate_by_name=True, frozen=True
    )


class PackageInfo(_ManifestModel):
    """
    Availability of one package for one target
    """

    available: bool
    url: str | None = None
    hash: str | None = None
    # Published descriptors spell these with underscores
    xz_url: str | None = pydantic.Field(
        default=None, validation_alias=pydantic.AliasChoices("xz-url", "xz_url")
    )
    xz_hash: str | None = pydantic.Field(
        default=None, validation_alias=pydantic.AliasChoices("xz-hash", "xz_hash")
    )


class PackageTargets(_ManifestModel):
    # Empty when the package has no release in this descriptor
    version: str = ""
    target: dict[str, PackageInfo] = {}


class Rename(_ManifestModel):
    to: str


class Manifest(_ManifestModel):
    """
    One day's published release descriptor.
    """

    manifest_version: int
    date: datetime.date
    pkg: dict[str, PackageTargets]
    renames: dict[str, Rename] = {}

    def canonical_name(self, component: str) -> str:
        """
        Map a historical component alias to the package key it was renamed to.
        """
        rename = self.renames.get(component)
        if rename is None:
            return component
        return rename.to

    def pkg_for_target(self, package: str, target: str) -> PackageInfo | None:
        """
        Look up a package for a target, falling back to the wildcard entry.
        """
        package_targets = self.pkg.get(package)
        if package_targets is None:
            return None

        package_info = package_targets.target.get(target)
        if package_info is None:
            package_info = package_targets.target.get(WILDCARD_TARGET)
        return package_info

    def resolve(self, component: str, target: str) -> PackageInfo | None:
        return self.pkg_for_target(self.canonical_name(component), target)

    def is_available(self, component: str, target: str) -> bool:
        package_info = self.resolve(component, target)
        return package_info is not None and package_info.available

    def pkg_version(self, component: str) -> version_models.Version | None:
        """
        Published version of a component in this descriptor.

        Returns None when the package is absent, unpublished or carries a version string that does
        not parse.
        """
        package_targets = self.pkg.get(self.canonical_name(component))
        if package_targets is None or package_targets.version == "":
            return None

        try:
            return version_models.parse_version(package_targets.version)
        except version_models.ParseError as e:
            rupin.logging.debug("Ignoring version of %s in %s: %s", component, self.date, e)
            return None


def load_manifest(text: str) -> Manifest:
    """
    Parse a TOML release descriptor.
    """
    try:
        manifest_dict = tomllib.loads(text)
        return Manifest.model_validate(manifest_dict)
    except (tomllib.TOMLDecodeError, pydantic.ValidationError) as e:
        raise version_models.ParseError(f"Malformed release descriptor: {e}") from e


def load_manifest_file(path: pathlib.Path) -> Manifest:
    with path.open("r", encoding="utf-8") as f:
        return load_manifest(f.read())
