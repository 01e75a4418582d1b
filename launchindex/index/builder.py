"""
Entry Builder - Normalize raw applications and plugin manifests into entries.

Input shapes (as produced by discovery):

    apps:    [{"name": "Firefox", "path": "/usr/share/applications/firefox.desktop",
               "icon": "firefox"}]
    plugins: [{"name": "Translate", "path": "/plugins/translate", "logo": "logo.png",
               "main": None,
               "features": [{"code": "tr", "explain": "Translate text",
                             "cmds": ["translate", "fanyi",
                                      {"type": "over", "label": "Translate selection"}]}]}]

Output is a pair of partitions in input traversal order (apps, then for each
plugin: launcher, features, commands). Relevance ties fall back to this order.
Malformed records are skipped with a warning, never aborting the build.
"""

from dataclasses import dataclass, field

from loguru import logger

from .entries import (
    EntryIdentity,
    EntryKind,
    FreeTextCommand,
    IndexEntry,
    RegexCommand,
    TextCommand,
    parse_command,
)
from .phonetic import phonetic_fields


@dataclass(frozen=True)
class Partitions:
    """Disjoint fuzzy-searchable and pattern-matched entry sets."""
    fuzzy: tuple[IndexEntry, ...] = field(default_factory=tuple)
    pattern: tuple[IndexEntry, ...] = field(default_factory=tuple)

    @property
    def applications(self) -> tuple[IndexEntry, ...]:
        return tuple(e for e in self.fuzzy if e.kind is EntryKind.APPLICATION)

    def __len__(self) -> int:
        return len(self.fuzzy) + len(self.pattern)


def build_entries(apps, plugins) -> Partitions:
    """
    Build both index partitions from raw discovery output.

    Args:
        apps: Iterable of application dicts ({name, path, icon?})
        plugins: Iterable of plugin manifest dicts

    Returns:
        Partitions with fuzzy and pattern entries
    """
    fuzzy: list[IndexEntry] = []
    pattern: list[IndexEntry] = []

    for raw in apps or ():
        entry = _build_app(raw)
        if entry:
            fuzzy.append(entry)

    app_count = len(fuzzy)

    for manifest in plugins or ():
        if not _has_name_and_path(manifest):
            logger.warning(f"Skipping malformed plugin manifest: {manifest!r:.120}")
            continue
        _build_plugin(manifest, fuzzy, pattern)

    logger.debug(
        f"Built index: {app_count} apps, {len(fuzzy) - app_count} plugin entries, "
        f"{len(pattern)} pattern commands"
    )
    return Partitions(fuzzy=tuple(fuzzy), pattern=tuple(pattern))


def _has_name_and_path(raw) -> bool:
    return (
        isinstance(raw, dict)
        and isinstance(raw.get("name"), str) and bool(raw["name"])
        and isinstance(raw.get("path"), str) and bool(raw["path"])
    )


def _build_app(raw) -> IndexEntry | None:
    if not _has_name_and_path(raw):
        logger.warning(f"Skipping malformed application record: {raw!r:.120}")
        return None

    name = raw["name"]
    key, initials, words = phonetic_fields(name)
    return IndexEntry(
        identity=EntryIdentity(raw["path"]),
        display_name=name,
        kind=EntryKind.APPLICATION,
        icon=raw.get("icon"),
        phonetic_key=key,
        phonetic_initials=initials,
        word_initials=words,
    )


def _features(manifest) -> list[dict]:
    features = manifest.get("features")
    if features is None:
        return []
    if not isinstance(features, list):
        logger.warning(f"Plugin {manifest['name']!r} has non-list features, ignoring them")
        return []
    return [f for f in features if isinstance(f, dict) and f.get("code")]


def _commands(feature) -> list:
    cmds = feature.get("cmds")
    return cmds if isinstance(cmds, list) else []


def default_feature(manifest) -> str | None:
    """
    Pick the feature a bare plugin launch opens.

    Plugins declaring a main entry point need none. Otherwise the first
    feature with at least one plain text command wins.
    """
    if manifest.get("main"):
        return None
    for feature in _features(manifest):
        if any(isinstance(cmd, str) for cmd in _commands(feature)):
            return feature["code"]
    return None


def _build_plugin(manifest, fuzzy: list[IndexEntry], pattern: list[IndexEntry]) -> None:
    path = manifest["path"]
    plugin_name = manifest["name"]
    icon = manifest.get("logo")

    key, initials, words = phonetic_fields(plugin_name)
    fuzzy.append(IndexEntry(
        identity=EntryIdentity(path),
        display_name=plugin_name,
        kind=EntryKind.PLUGIN_LAUNCHER,
        icon=icon,
        phonetic_key=key,
        phonetic_initials=initials,
        word_initials=words,
        feature_code=default_feature(manifest),
        plugin_name=plugin_name,
    ))

    for feature in _features(manifest):
        code = feature["code"]
        explain = feature.get("explain") or ""

        for index, raw_cmd in enumerate(_commands(feature)):
            cmd = parse_command(raw_cmd)
            identity = EntryIdentity(path, code, index)

            if isinstance(cmd, TextCommand):
                key, initials, words = phonetic_fields(cmd.label)
                fuzzy.append(IndexEntry(
                    identity=identity,
                    display_name=cmd.label,
                    kind=EntryKind.PLUGIN_TEXT_COMMAND,
                    icon=icon,
                    phonetic_key=key,
                    phonetic_initials=initials,
                    word_initials=words,
                    feature_code=code,
                    explain=explain,
                    plugin_name=plugin_name,
                ))
            elif isinstance(cmd, (RegexCommand, FreeTextCommand)):
                pattern.append(IndexEntry(
                    identity=identity,
                    display_name=cmd.label,
                    kind=EntryKind.PLUGIN_PATTERN_COMMAND,
                    icon=icon,
                    feature_code=code,
                    explain=explain,
                    plugin_name=plugin_name,
                    match_policy=cmd.policy,
                ))
            else:
                logger.warning(
                    f"Skipping unrecognised command in {plugin_name}/{code}: {raw_cmd!r:.80}"
                )
