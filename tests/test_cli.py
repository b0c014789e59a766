"""Tests for the collegecache command line."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from collegecache import cli as cli_module
from collegecache.cli import cli
from collegecache.constants import STATES
from collegecache.data_types import PipelineOutcome
from tests.mock_server import MockDashboard


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def scrape_args(server_url: str, output_dir: Path) -> list[str]:
    """Options pointing ``scrape`` at the mock dashboard."""
    return [
        "scrape",
        "--output-dir",
        str(output_dir),
        "--index-url-template",
        f"{server_url}/index?state={{state}}",
        "--detail-url-template",
        f"{server_url}/detail?aicteid={{record_id}}",
        "--retry-delay",
        "0",
        "--timeout",
        "5",
    ]


class TestScrapeCommand:
    """Tests for `collegecache scrape`."""

    def test_invalid_state(self, runner: CliRunner, tmp_path: Path):
        """An unknown state shall exit with a usage error and list states."""
        result = runner.invoke(
            cli,
            ["scrape", "-s", "Atlantis", "--output-dir", str(tmp_path)],
        )

        assert result.exit_code == 2
        assert "Invalid state 'Atlantis'" in result.output
        assert "Andhra Pradesh" in result.output
        assert list(tmp_path.iterdir()) == []

    def test_scrape_single_state(
        self,
        runner: CliRunner,
        scrape_args: list[str],
        output_dir: Path,
    ):
        """Scraping one state shall write its document and report it."""
        result = runner.invoke(cli, [*scrape_args, "-s", "Goa"])

        assert result.exit_code == 0, result.output
        assert "States:    1" in result.output
        assert "Goa: updated" in result.output
        assert "Done." in result.output
        assert (output_dir / "goa.json").exists()

    def test_rerun_reports_up_to_date(
        self, runner: CliRunner, scrape_args: list[str]
    ):
        """A second scrape of an unchanged state shall report up-to-date."""
        runner.invoke(cli, [*scrape_args, "-s", "Goa"])

        result = runner.invoke(cli, [*scrape_args, "-s", "Goa"])

        assert result.exit_code == 0, result.output
        assert "Goa: up-to-date" in result.output

    def test_failed_state_exits_nonzero(
        self,
        runner: CliRunner,
        scrape_args: list[str],
        dashboard: MockDashboard,
    ):
        """A state that fails shall be reported and exit with status 1."""
        dashboard.failures["/detail"] = 1

        result = runner.invoke(
            cli, [*scrape_args, "-s", "Goa", "--max-retries", "0"]
        )

        assert result.exit_code == 1
        assert "Goa: FAILED" in result.output
        assert "1 state(s) failed: Goa" in result.output

    def test_options_reach_orchestrator(
        self, runner: CliRunner, tmp_path: Path, monkeypatch
    ):
        """Command options and env vars shall be passed through."""
        seen = {}

        def fake_scrape(settings, state=None, processes=1):
            seen.update(settings=settings, state=state, processes=processes)
            return {"Kerala": PipelineOutcome.FRESH}

        monkeypatch.setattr(cli_module, "run_scrape", fake_scrape)

        result = runner.invoke(
            cli,
            ["scrape", "-s", "Kerala", "-p", "3", "--max-retries", "5"],
            env={
                "COLLEGECACHE_OUTPUT_DIR": str(tmp_path / "data"),
                "COLLEGECACHE_RETRY_DELAY": "1.5",
            },
        )

        assert result.exit_code == 0, result.output
        assert seen["state"] == "Kerala"
        assert seen["processes"] == 3
        settings = seen["settings"]
        assert settings.output_dir == tmp_path / "data"
        assert settings.retry_delay == 1.5
        assert settings.max_retries == 5
        assert "Kerala: up-to-date" in result.output

    def test_processes_must_be_positive(self, runner: CliRunner):
        """--processes 0 shall be rejected."""
        result = runner.invoke(cli, ["scrape", "-p", "0"])

        assert result.exit_code == 2


class TestStatesCommand:
    """Tests for `collegecache states`."""

    def test_lists_every_state(self, runner: CliRunner):
        """Every valid state name shall be printed, one per line."""
        result = runner.invoke(cli, ["states"])

        assert result.exit_code == 0
        assert result.output.splitlines() == list(STATES)


class TestCountCommand:
    """Tests for `collegecache count`."""

    def test_counts_cached_colleges(
        self,
        runner: CliRunner,
        scrape_args: list[str],
        output_dir: Path,
    ):
        """count shall report colleges per cached state and the total."""
        runner.invoke(cli, [*scrape_args, "-s", "Goa"])
        runner.invoke(cli, [*scrape_args, "-s", "Andhra Pradesh"])

        result = runner.invoke(cli, ["count", "--output-dir", str(output_dir)])

        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "Andhra Pradesh: 2",
            "Goa: 1",
            "Total number of colleges: 3",
        ]

    def test_empty_cache(self, runner: CliRunner, tmp_path: Path):
        """count on an empty directory shall report zero."""
        result = runner.invoke(cli, ["count", "--output-dir", str(tmp_path)])

        assert result.exit_code == 0
        assert result.output == "Total number of colleges: 0\n"
