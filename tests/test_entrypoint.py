"""Tests for the console entry point."""

from unittest.mock import AsyncMock, patch

import pytest

from safari_publisher import main as main_module


def _close_and_return(value):
    def run(coro):
        coro.close()
        return value

    return run


def test_main_exits_with_runner_code() -> None:
    with patch.object(main_module.uvloop, "run", side_effect=_close_and_return(1)):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

    assert exc_info.value.code == 1


def test_main_handles_keyboard_interrupt() -> None:
    def interrupted(coro):
        coro.close()
        raise KeyboardInterrupt

    with patch.object(main_module.uvloop, "run", side_effect=interrupted):
        with pytest.raises(SystemExit) as exc_info:
            main_module.main()

    assert exc_info.value.code == 1


@pytest.mark.asyncio
async def test_async_main_returns_runner_code() -> None:
    with patch.object(
        main_module.CLIRunner, "run", new=AsyncMock(return_value=0)
    ):
        assert await main_module.async_main() == 0
