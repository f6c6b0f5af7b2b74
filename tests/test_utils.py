"""Unit tests for utility functions (reels_setup.utils).

Tests cover:
- run_command (success, failure, timeout, missing binary, env vars)
- check_url_reachable (mock httpx)
- Rich output helpers
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from reels_setup.utils import (
    check_url_reachable,
    print_error,
    print_header,
    print_info,
    print_step,
    print_summary_table,
    print_warning,
    run_command,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "print('hello')"]
        )
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"]
        )
        assert returncode == 3
        assert stderr == "boom"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_env_is_merged(self):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['REELS_TEST_VAR'])"],
            env={"REELS_TEST_VAR": "42"},
        )
        assert returncode == 0
        assert stdout == "42"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_binary(self):
        returncode, _, stderr = await run_command(["definitely-not-a-real-binary-xyz"])
        assert returncode == 127
        assert "Command not found" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self):
        async def _mock_exec(*args, **kwargs):
            proc = AsyncMock()

            async def _communicate():
                await asyncio.sleep(10)
                return (b"", b"")

            proc.communicate = _communicate
            proc.kill = MagicMock()
            proc.wait = AsyncMock(return_value=-9)
            return proc

        with patch("asyncio.create_subprocess_exec", side_effect=_mock_exec):
            returncode, _, stderr = await run_command(["gh", "auth", "status"], timeout=0.01)
        assert returncode == -1
        assert "timed out" in stderr


# ---------------------------------------------------------------------------
# check_url_reachable
# ---------------------------------------------------------------------------


def _mock_client(get: AsyncMock) -> MagicMock:
    client = AsyncMock()
    client.get = get
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


class TestCheckUrlReachable:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_ok_status(self):
        response = MagicMock(status_code=200)
        client = _mock_client(AsyncMock(return_value=response))
        with patch("httpx.AsyncClient", return_value=client):
            assert await check_url_reachable("https://github.com/octocat/repo") is True
        client.get.assert_awaited_once_with("https://github.com/octocat/repo")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_not_found(self):
        client = _mock_client(AsyncMock(return_value=MagicMock(status_code=404)))
        with patch("httpx.AsyncClient", return_value=client):
            assert await check_url_reachable("https://github.com/octocat/missing") is False

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self):
        client = _mock_client(AsyncMock(side_effect=httpx.ConnectError("offline")))
        with patch("httpx.AsyncClient", return_value=client):
            assert await check_url_reachable("https://github.com/octocat/repo") is False


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


class TestRichHelpers:
    @pytest.mark.unit
    def test_helpers_do_not_raise(self):
        print_header("Section")
        print_step("done")
        print_info("note")
        print_error("failed")
        print_warning("careful")

    @pytest.mark.unit
    def test_summary_table_renders_values(self):
        with patch("reels_setup.utils.console") as mock_console:
            print_summary_table({"Owner": "octocat", "Files": 11}, title="Info")
        table = mock_console.print.call_args_list[0].args[0]
        assert table.title == "Info"
        assert table.row_count == 2
