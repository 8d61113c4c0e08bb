"""Tests for background change reports of the watch command."""

import asyncio
import logging

from cbox.commands.watch_cmd import spawn_report


def test_failed_report_is_logged(caplog):
    tasks: set[asyncio.Task] = set()

    async def report() -> None:
        raise FileNotFoundError("settings.py vanished")

    async def scenario():
        spawn_report(tasks, report())
        await asyncio.sleep(0.01)

    with caplog.at_level(logging.ERROR, logger="cbox.commands.watch_cmd"):
        asyncio.run(scenario())

    assert tasks == set()
    assert "Change report failed" in caplog.text
    assert "settings.py vanished" in caplog.text


def test_finished_report_is_released(caplog):
    tasks: set[asyncio.Task] = set()
    done: list[bool] = []

    async def report() -> None:
        done.append(True)

    async def scenario():
        task = spawn_report(tasks, report())
        assert task in tasks
        await asyncio.sleep(0.01)

    with caplog.at_level(logging.ERROR, logger="cbox.commands.watch_cmd"):
        asyncio.run(scenario())

    assert done == [True]
    assert tasks == set()
    assert "Change report failed" not in caplog.text
