"""Command-line interface for safari-publisher."""

from safari_publisher.cli.parser import CLIParser, CommandLineArgs
from safari_publisher.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner", "CommandLineArgs"]
