"""Top-level package for safari-publisher.

Publishes the Safari build of the extension: pulls the packaged build from a
GitHub release, builds it with Xcode and pushes the result back.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("safari-publisher")
except PackageNotFoundError:
    # Fallback for development environments where package isn't installed
    __version__ = "dev"
