"""Provider wrapper layer for the external tools the store drives.

Related interfaces:
- ``types`` defines the source-control, build, and launch contracts.
- ``git`` and ``xcode`` hold the subprocess-backed implementations.
"""

from repo_harbor.lib.providers.git import GIT_PROVIDER, GitProvider
from repo_harbor.lib.providers.types import (
    BuildProvider,
    LaunchProvider,
    SourceControlProvider,
)
from repo_harbor.lib.providers.xcode import (
    DEFAULT_APP_DIR,
    DEFAULT_BUILD_COMMAND,
    IOSSimLaunchProvider,
    XcodeBuildProvider,
    find_app_name,
)

__all__ = [
    "DEFAULT_APP_DIR",
    "DEFAULT_BUILD_COMMAND",
    "GIT_PROVIDER",
    "BuildProvider",
    "GitProvider",
    "IOSSimLaunchProvider",
    "LaunchProvider",
    "SourceControlProvider",
    "XcodeBuildProvider",
    "find_app_name",
]
