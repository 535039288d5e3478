"""CLI runner for safari-publisher.

Builds the run configuration from flags, secrets and the checkout, then
drives the publish pipeline and maps its outcome to an exit code.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path

from safari_publisher.cli.parser import CLIParser
from safari_publisher.config import PublishConfig, flag_enabled
from safari_publisher.core.github import ReleaseClient
from safari_publisher.core.http_session import create_http_session
from safari_publisher.core.pipeline import PublishSummary, run_publish
from safari_publisher.exceptions import PublisherError
from safari_publisher.infrastructure.locator import find_repo_root
from safari_publisher.infrastructure.secrets import (
    KeyringTokenStore,
    load_secrets,
)
from safari_publisher.logger import get_logger, set_console_level

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


class CLIRunner:
    """Runs one publish invocation."""

    def __init__(
        self,
        cwd: Path | None = None,
        home: Path | None = None,
        environ: Mapping[str, str] | None = None,
        token_store: KeyringTokenStore | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            cwd: Directory searches start from (defaults to the cwd)
            home: Boundary of upward searches (defaults to $HOME)
            environ: Environment for owner/repo fallbacks
            token_store: Keyring fallback for the GitHub token

        """
        self.cwd = cwd or Path.cwd()
        self.home = home or Path.home()
        self.environ = environ
        self.token_store = token_store or KeyringTokenStore()
        self.parser = CLIParser()

    def build_config(self, argv: Sequence[str] | None = None) -> PublishConfig:
        """Parse argv and gather secrets and the checkout root.

        Raises:
            ConfigurationError: If a required input is missing

        """
        args = self.parser.parse_args(argv)
        if flag_enabled(args, "verbose"):
            set_console_level("DEBUG")

        secrets = load_secrets(self.cwd, self.home)
        repo_root = find_repo_root(self.cwd, self.home)
        return PublishConfig.from_sources(
            args,
            secrets,
            repo_root,
            environ=self.environ,
            token_store=self.token_store,
        )

    async def publish(self, config: PublishConfig) -> PublishSummary:
        """Run the pipeline with a session scoped to this run."""
        async with create_http_session() as session:
            client = ReleaseClient(
                session, config.owner, config.repo, config.token
            )
            return await run_publish(config, client)

    async def run(self, argv: Sequence[str] | None = None) -> int:
        """Execute one invocation and return its exit code."""
        try:
            config = self.build_config(argv)
            logger.debug(
                "Publishing %s/%s %s (%s)",
                config.owner,
                config.repo,
                config.tag,
                ", ".join(p.value for p in config.platforms),
            )
            await self.publish(config)
        except PublisherError as e:
            logger.error("%s", e)
            return EXIT_FAILURE
        return EXIT_OK
