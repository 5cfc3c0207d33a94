import dataclasses
import datetime
import enum
import functools
import re

# Beta tags may carry a prerelease number, e.g. "1.32.0-beta.11"
_VERSION_RE = re.compile(
    r"(?P<version>\d+(?:\.\d+)+)(?:-(?P<channel>[A-Za-z]+)(?:\.\d+)?)?\s+\((?P<commit>[^()]*)\)"
)
_COMMIT_RE = re.compile(r"\(?(?P<hash>\w+)\s+(?P<date>\d{4}-\d{2}-\d{2})\)?")


class ParseError(ValueError):
    """
    Raised when a version, commit or channel string is malformed.
    """


@functools.total_ordering
class Channel(enum.Enum):
    """
    Release track, ordered by maturity: stable < beta < nightly.
    """

    STABLE = "stable"
    BETA = "beta"
    NIGHTLY = "nightly"

    @classmethod
    def parse(cls, tag: str | None) -> "Channel":
        """
        Parse a channel tag. An empty or missing tag means stable.
        """
        if tag is None or tag == "":
            return cls.STABLE
        try:
            return cls(tag)
        except ValueError:
            raise ParseError(f"Unknown channel: {tag}") from None

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Channel):
            return NotImplemented
        members = list(Channel)
        return members.index(self) < members.index(other)

    def __str__(self) -> str:
        return self.value


@dataclasses.dataclass(frozen=True, order=True)
class Commit:
    # Commits are identified by date only, the hash is carried for display
    date: datetime.date
    hash: str = dataclasses.field(compare=False)

    def __str__(self) -> str:
        return f"{self.hash} {self.date.isoformat()}"


@dataclasses.dataclass(frozen=True, order=True)
class Version:
    channel: Channel
    version: str
    commit: Commit

    def __str__(self) -> str:
        if self.channel == Channel.STABLE:
            return f"{self.version} ({self.commit})"
        return f"{self.version}-{self.channel} ({self.commit})"

    @property
    def date(self) -> datetime.date:
        return self.commit.date


def parse_commit(text: str) -> Commit:
    """
    Parse "<hash> <date>", optionally wrapped in parentheses.
    """
    match = _COMMIT_RE.fullmatch(text.strip())
    if match is None:
        raise ParseError(f"Malformed commit: {text!r}")

    try:
        date = datetime.date.fromisoformat(match["date"])
    except ValueError as e:
        raise ParseError(f"Malformed commit date in {text!r}: {e}") from e

    return Commit(date=date, hash=match["hash"])


def parse_version(text: str) -> Version:
    """
    Parse a version string such as "1.33.0-nightly (9eac38634 2018-12-31)".
    """
    match = _VERSION_RE.fullmatch(text.strip())
    if match is None:
        raise ParseError(f"Malformed version: {text!r}")

    return Version(
        channel=Channel.parse(match["channel"]),
        version=match["version"],
        commit=parse_commit(match["commit"]),
    )
