"""
Discovery - Contract for the collaborator that enumerates launchable things.

Scanning start menus, .desktop files or plugin directories happens outside
this package. A discovery object only has to hand back plain data:

    get_apps()    -> [{"name", "path", "icon"?}, ...]
    get_plugins() -> [{"name", "path", "logo"?, "main"?,
                       "features": [{"code", "explain", "cmds": [...]}]}, ...]

Both are called again whenever the coordinator is told something changed.
"""

from typing import Iterable, Protocol


class Discovery(Protocol):
    def get_apps(self) -> Iterable[dict]: ...

    def get_plugins(self) -> Iterable[dict]: ...


class StaticDiscovery:
    """In-memory discovery, for embedding callers that already hold the lists."""

    def __init__(self, apps: list[dict] | None = None, plugins: list[dict] | None = None):
        self.apps = list(apps or [])
        self.plugins = list(plugins or [])

    def get_apps(self) -> list[dict]:
        return list(self.apps)

    def get_plugins(self) -> list[dict]:
        return list(self.plugins)

    def update(self, apps: list[dict] | None = None, plugins: list[dict] | None = None) -> None:
        """Replace either list; callers then notify the coordinator."""
        if apps is not None:
            self.apps = list(apps)
        if plugins is not None:
            self.plugins = list(plugins)
