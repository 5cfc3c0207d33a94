import dataclasses
import datetime

from rupin.models import version as version_models


@dataclasses.dataclass(frozen=True)
class ComponentUpdate:
    name: str
    from_version: version_models.Version
    to_version: version_models.Version

    def __str__(self) -> str:
        return f"{self.name} - from {self.from_version} to {self.to_version}"


@dataclasses.dataclass(frozen=True)
class Component:
    name: str
    required: bool
    # Locally installed version, when the toolchain ships its own descriptor
    version: version_models.Version | None = None

    def update_to(self, new_version: version_models.Version | None) -> ComponentUpdate | None:
        """
        Describe the update to new_version, if it is strictly newer than what is installed.
        """
        if self.version is None or new_version is None:
            return None
        if new_version <= self.version:
            return None
        return ComponentUpdate(name=self.name, from_version=self.version, to_version=new_version)


@dataclasses.dataclass(frozen=True)
class ToolchainSnapshot:
    """
    The locally installed toolchain, captured once per run.
    """

    channel: version_models.Channel
    target: str
    version: version_models.Version
    components: tuple[Component, ...]
    toolchain: str = ""

    @property
    def baseline_date(self) -> datetime.date:
        """
        Commit date of the installed build.
        """
        return self.version.commit.date

    @property
    def component_names(self) -> list[str]:
        return [component.name for component in self.components]

    @property
    def optional_components(self) -> list[str]:
        return [component.name for component in self.components if not component.required]
