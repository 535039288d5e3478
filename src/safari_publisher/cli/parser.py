"""CLI argument parser for safari-publisher.

Flags are written ``name=value`` or as a bare ``name`` (meaning enabled):

    safari-publisher tag=v1.2.3 asset=safari.zip macos publish=github
"""

import argparse
from collections.abc import Mapping, Sequence
from types import MappingProxyType

from safari_publisher import __version__

CommandLineArgs = Mapping[str, str]

KNOWN_FLAGS = (
    "tag",
    "asset",
    "githubOwner",
    "githubRepo",
    "ios",
    "macos",
    "publish",
    "keep",
    "keepOnFailure",
    "distribute",
    "verbose",
)


def split_flags(tokens: Sequence[str]) -> CommandLineArgs:
    """Turn ``name=value`` / ``name`` tokens into a read-only mapping.

    Only the first ``=`` separates name from value; a later duplicate
    flag overrides an earlier one.
    """
    args: dict[str, str] = {}
    for token in tokens:
        name, sep, value = token.partition("=")
        args[name] = value if sep else ""
    return MappingProxyType(args)


class CLIParser:
    """Command-line argument parser for safari-publisher."""

    def parse_args(self, argv: Sequence[str] | None = None) -> CommandLineArgs:
        """Parse command-line arguments.

        Args:
            argv: Arguments without the program name (defaults to sys.argv)

        Returns:
            Read-only mapping of flag name to value

        """
        parser = self._create_main_parser()
        namespace = parser.parse_args(argv)
        return split_flags(namespace.flags)

    def _create_main_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="safari-publisher",
            description=(
                "Build the Safari extension from a GitHub release asset"
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=f"""
Flags:
  {", ".join(KNOWN_FLAGS)}

Examples:
  # Archive the iOS app from a release asset
  %(prog)s tag=v1.2.3 asset=safari.zip ios

  # Build, export and re-upload the macOS app, bumping the build number
  %(prog)s tag=v1.2.3 asset=safari.zip macos publish=github distribute

  # Keep the temporary workspace if something fails
  %(prog)s tag=v1.2.3 asset=safari.zip keepOnFailure
            """,
        )
        parser.add_argument(
            "--version",
            action="version",
            version=f"%(prog)s {__version__}",
        )
        parser.add_argument(
            "flags",
            nargs="*",
            metavar="name[=value]",
            help="run flags",
        )
        return parser
