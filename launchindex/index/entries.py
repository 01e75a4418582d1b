"""
Index Entries - Typed, immutable records produced by the entry builder.

Every launchable unit (application, plugin launcher, plugin command) becomes
one IndexEntry. Entries land in exactly one of two partitions:

  - fuzzy:   APPLICATION, PLUGIN_LAUNCHER, PLUGIN_TEXT_COMMAND
  - pattern: PLUGIN_PATTERN_COMMAND (accepted by a boolean match policy)

Plugin commands are a tagged union (TextCommand | RegexCommand |
FreeTextCommand) decided once by parse_command().
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Optional, Union

DEFAULT_FREE_TEXT_MIN = 1
DEFAULT_FREE_TEXT_MAX = 10000


class EntryKind(str, Enum):
    APPLICATION = "app"
    PLUGIN_LAUNCHER = "plugin"
    PLUGIN_TEXT_COMMAND = "text"
    PLUGIN_PATTERN_COMMAND = "pattern"


class EntryIdentity(NamedTuple):
    """Structural key, unique across both partitions of one build."""
    path: str
    feature_code: Optional[str] = None
    command_index: Optional[int] = None


class RecordKey(NamedTuple):
    """Key used by history and pinned records (feature selector included)."""
    path: str
    feature_code: Optional[str] = None


# Match policies (pattern partition only)

@dataclass(frozen=True)
class RegexPolicy:
    """Accept when len(query) >= min_length and pattern is found in query."""
    pattern: str
    min_length: int = 0


@dataclass(frozen=True)
class FreeTextPolicy:
    """Accept any query within length bounds that the exclude pattern misses."""
    min_length: int = DEFAULT_FREE_TEXT_MIN
    max_length: int = DEFAULT_FREE_TEXT_MAX
    exclude: Optional[str] = None


MatchPolicy = Union[RegexPolicy, FreeTextPolicy]


# Raw plugin commands, parsed once at build time

@dataclass(frozen=True)
class TextCommand:
    label: str


@dataclass(frozen=True)
class RegexCommand:
    label: str
    policy: RegexPolicy


@dataclass(frozen=True)
class FreeTextCommand:
    label: str
    policy: FreeTextPolicy


Command = Union[TextCommand, RegexCommand, FreeTextCommand]


def parse_command(raw) -> Command | None:
    """
    Turn a manifest command into its tagged variant.

    Args:
        raw: Either a plain string (text command) or a dict with
             type "regex" ({label, match, minLength}) or
             type "over" ({label, minLength?, maxLength?, exclude?})

    Returns:
        The parsed command, or None when the shape is not recognised
    """
    if isinstance(raw, str):
        return TextCommand(label=raw) if raw else None

    if not isinstance(raw, dict):
        return None

    label = raw.get("label")
    if not isinstance(label, str) or not label:
        return None

    cmd_type = raw.get("type")
    if cmd_type == "regex":
        match = raw.get("match")
        if not isinstance(match, str) or not match:
            return None
        return RegexCommand(
            label=label,
            policy=RegexPolicy(pattern=match, min_length=_as_int(raw.get("minLength"), 0)),
        )

    if cmd_type == "over":
        exclude = raw.get("exclude")
        return FreeTextCommand(
            label=label,
            policy=FreeTextPolicy(
                min_length=_as_int(raw.get("minLength"), DEFAULT_FREE_TEXT_MIN),
                max_length=_as_int(raw.get("maxLength"), DEFAULT_FREE_TEXT_MAX),
                exclude=exclude if isinstance(exclude, str) and exclude else None,
            ),
        )

    return None


def _as_int(value, default: int) -> int:
    # bool is an int subclass; manifests never mean True as a length
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return default


@dataclass(frozen=True)
class IndexEntry:
    """One indexed, launchable unit."""
    identity: EntryIdentity
    display_name: str
    kind: EntryKind
    icon: Optional[str] = None
    phonetic_key: str = ""
    phonetic_initials: str = ""
    word_initials: str = ""
    feature_code: Optional[str] = None
    explain: str = ""
    plugin_name: str = ""
    match_policy: Optional[MatchPolicy] = None

    @property
    def path(self) -> str:
        return self.identity.path

    @property
    def record_key(self) -> RecordKey:
        """Identity used for history/pinned (plugins include the feature)."""
        if self.kind is EntryKind.APPLICATION:
            return RecordKey(self.path)
        return RecordKey(self.path, self.feature_code)

    @property
    def is_fuzzy_searchable(self) -> bool:
        return self.kind is not EntryKind.PLUGIN_PATTERN_COMMAND
