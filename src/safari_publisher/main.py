"""Main CLI entry point for safari-publisher."""

import sys

import uvloop

from safari_publisher.cli import CLIRunner
from safari_publisher.logger import get_logger

logger = get_logger(__name__)


async def async_main() -> int:
    """Run the CLI asynchronously and return the exit code."""
    logger.debug("CLI started")
    runner = CLIRunner()
    try:
        return await runner.run()
    except Exception:
        logger.exception("CLI encountered an error")
        raise


def main() -> None:
    """Run the CLI application on the uvloop event loop."""
    try:
        code = uvloop.run(async_main())
    except KeyboardInterrupt:
        logger.info("Publish cancelled by user")
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
