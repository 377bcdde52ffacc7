"""Tests for the okladiy and okladiy-run-one entry points."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from okladiy import main as main_module
from okladiy import run_one
from okladiy.models import CandidateRecord


@pytest.fixture(autouse=True)
def no_logging_setup():
    # basicConfig(force=True) would strip pytest's capture handlers
    with patch("okladiy.main.setup_logging"), patch("okladiy.run_one.setup_logging"):
        yield


class TestMain:

    def test_flags_reach_the_run(self, tmp_path):
        output = tmp_path / "out.json"
        with patch("okladiy.main.run", new_callable=AsyncMock) as run:
            assert main_module.main(["--dry-run", "--output", str(output)]) == 0

        config = run.call_args.args[0]
        assert config.output_path == Path(output)
        assert run.call_args.kwargs["dry_run"] is True

    def test_env_output_path(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OKLADIY_OUTPUT_PATH", str(tmp_path / "env.json"))
        with patch("okladiy.main.run", new_callable=AsyncMock) as run:
            main_module.main([])

        assert run.call_args.args[0].output_path == tmp_path / "env.json"

    def test_fatal_error_exit_code(self):
        with patch("okladiy.main.run", new_callable=AsyncMock, side_effect=OSError("disk full")):
            assert main_module.main([]) == 1


class TestRunOne:

    def test_prints_records(self, capsys):
        adapter = MagicMock()
        adapter.name = "stub"
        adapter.fetch = AsyncMock(return_value=[CandidateRecord(title="Band A", price="$10")])

        with patch("okladiy.run_one.get_adapter", return_value=adapter):
            assert run_one.main(["stub"]) == 0

        out = capsys.readouterr().out
        assert '"title": "Band A"' in out
        assert "1 show(s) from stub" in out

    def test_unknown_name(self):
        assert run_one.main(["nowhere"]) == 1

    def test_adapter_failure(self):
        adapter = MagicMock()
        adapter.name = "stub"
        adapter.fetch = AsyncMock(side_effect=RuntimeError("boom"))

        with patch("okladiy.run_one.get_adapter", return_value=adapter):
            assert run_one.main(["stub"]) == 1

    def test_debug_runs_do_not_write_log_files(self):
        with patch("okladiy.run_one.get_adapter", side_effect=KeyError("nope")):
            run_one.main(["x"])

        config = run_one.setup_logging.call_args.args[0]
        assert config.log_dir is None
