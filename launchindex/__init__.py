# launchindex Package
"""
Quick-launch index for applications and plugin commands.

Components:
  - Entry builder (index): raw apps/plugin manifests -> typed entries
  - Search (search): fuzzy index, pattern matcher, orchestrator
  - Services (services): re-index coordinator, history, pinned list
"""

from .engine import QuickLaunchEngine

__version__ = "0.1.0"

__all__ = ["QuickLaunchEngine"]
