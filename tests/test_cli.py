"""
Tests for the synckeeper CLI — mirror, run-jobs, classify, clean-credentials.

Uses Click's CliRunner; robocopy and cmdkey are mocked at subprocess.run.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest import mock

import pytest
from click.testing import CliRunner

from synckeeper.main import cli

CLEAN_ENV = {
    "SYNCKEEPER_ROBOCOPY": "",
    "SYNCKEEPER_CMDKEY": "",
    "SYNCKEEPER_CREDENTIAL_PATTERN": "",
    "SYNCKEEPER_CREDENTIAL_FILTER": "",
    "LOG_LEVEL": "INFO",
    "LOG_FORMAT": "text",
}


def _completed(returncode: int = 0, stdout: str = "", stderr: str = ""):
    """Create a fake subprocess.CompletedProcess."""
    return subprocess.CompletedProcess(
        args=["tool"], returncode=returncode, stdout=stdout, stderr=stderr,
    )


def _run(args: list, env: dict | None = None):
    """Invoke the CLI without letting a stray .env leak in."""
    runner = CliRunner()
    with mock.patch("synckeeper.main.find_dotenv", return_value=""):
        return runner.invoke(cli, args, env=env or CLEAN_ENV, catch_exceptions=False)


def _mirror_args(log_base: Path, *extra: str) -> list:
    return [
        "mirror",
        "--source-path", r"\\SrvA\Data",
        "--destination-path", r"D:\Mirror",
        "--log-base-path", str(log_base),
        *extra,
    ]


# -- mirror -------------------------------------------------------------------

class TestMirrorCommand:
    """synckeeper mirror."""

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_exit_code_passthrough(self, mock_run, log_base):
        mock_run.return_value = _completed(returncode=10)

        result = _run(_mirror_args(log_base))

        assert result.exit_code == 10
        assert "could not be copied" in result.output
        assert (log_base / "Sync_Data_to_Mirror").is_dir()

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_success(self, mock_run, log_base):
        mock_run.return_value = _completed(returncode=1)

        result = _run(_mirror_args(log_base, "--robocopy-threads", "32"))

        assert result.exit_code == 1
        assert "/MT:32" in mock_run.call_args.args[0]

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_camel_case_flags(self, mock_run, log_base):
        """Scheduler entries written with the original flag names still work."""
        mock_run.return_value = _completed(returncode=0)

        result = _run([
            "mirror",
            "--sourcePath", r"\\SrvA\Data",
            "--destinationPath", r"D:\Mirror",
            "--logBasePath", str(log_base),
            "--robocopyThreads", "4",
            "--maxLogFilesToKeep", "2",
        ])

        assert result.exit_code == 0
        assert "/MT:4" in mock_run.call_args.args[0]

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_launch_failure_exits_97(self, mock_run, log_base):
        mock_run.side_effect = FileNotFoundError("robocopy")

        result = _run(_mirror_args(log_base))

        assert result.exit_code == 97

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_log_directory_failure_exits_99(self, mock_run, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        result = _run(_mirror_args(blocker))

        assert result.exit_code == 99
        mock_run.assert_not_called()

    @pytest.mark.parametrize("flag,value", [
        ("--robocopy-threads", "0"),
        ("--robocopy-threads", "129"),
        ("--max-log-files-to-keep", "0"),
        ("--max-log-files-to-keep", "101"),
    ])
    def test_out_of_range_rejected(self, log_base, flag, value):
        result = _run(_mirror_args(log_base, flag, value))
        assert result.exit_code == 2

    def test_missing_required(self):
        result = _run(["mirror", "--source-path", "a"])
        assert result.exit_code == 2
        assert "Missing option" in result.output

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_mirror_output_shown_on_console(self, mock_run, log_base):
        """Mirror tool output is logged at DEBUG and reaches the console at the default level."""
        mock_run.return_value = _completed(returncode=1, stdout="ROBOCOPY-OUT-LINE\n")

        result = _run(_mirror_args(log_base))

        assert result.exit_code == 1
        assert "ROBOCOPY-OUT-LINE" in result.output

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_robocopy_path_from_env(self, mock_run, log_base):
        mock_run.return_value = _completed()
        env = dict(CLEAN_ENV, SYNCKEEPER_ROBOCOPY=r"C:\Tools\robocopy.exe")

        _run(_mirror_args(log_base), env=env)

        assert mock_run.call_args.args[0][0] == r"C:\Tools\robocopy.exe"


# -- run-jobs -----------------------------------------------------------------

class TestRunJobsCommand:
    """synckeeper run-jobs."""

    @mock.patch("synckeeper.mirror.robocopy.subprocess.run")
    def test_highest_code_wins(self, mock_run, tmp_path, log_base):
        mock_run.side_effect = [_completed(returncode=1), _completed(returncode=9)]
        config = tmp_path / "jobs.yaml"
        config.write_text(
            f"defaults:\n  log_base_path: '{log_base}'\n"
            "jobs:\n"
            "  - source_path: /srv/a\n    destination_path: /mnt/a\n"
            "  - source_path: /srv/b\n    destination_path: /mnt/b\n",
            encoding="utf-8",
        )

        result = _run(["run-jobs", "--config", str(config)])

        assert result.exit_code == 9
        assert "2 job(s) run" in result.output
        assert (log_base / "Sync_a_to_a").is_dir()
        assert (log_base / "Sync_b_to_b").is_dir()

    def test_bad_config_exits_2(self, tmp_path):
        config = tmp_path / "jobs.yaml"
        config.write_text("jobs:\n  - source_path: a\n", encoding="utf-8")

        result = _run(["run-jobs", "--config", str(config)])

        assert result.exit_code == 2

    def test_blank_path_exits_2(self, tmp_path):
        config = tmp_path / "jobs.yaml"
        config.write_text(
            "jobs:\n  - source_path: '   '\n    destination_path: /mnt/a\n"
            f"    log_base_path: '{tmp_path}'\n",
            encoding="utf-8",
        )

        with mock.patch("synckeeper.mirror.robocopy.subprocess.run") as mock_run:
            result = _run(["run-jobs", "--config", str(config)])

        assert result.exit_code == 2
        mock_run.assert_not_called()

    def test_no_jobs(self, tmp_path):
        config = tmp_path / "jobs.yaml"
        config.write_text("jobs: []\n", encoding="utf-8")

        result = _run(["run-jobs", "--config", str(config)])

        assert result.exit_code == 0
        assert "No jobs to run" in result.output


# -- classify -----------------------------------------------------------------

class TestClassifyCommand:
    """synckeeper classify."""

    @pytest.mark.parametrize("code,label", [
        ("0", "INFO"), ("7", "INFO"), ("8", "WARNING"), ("16", "ERROR"),
        ("97", "FATAL"), ("99", "FATAL"),
    ])
    def test_labels(self, code, label):
        result = _run(["classify", code])
        assert result.exit_code == 0
        assert result.output.startswith(label)


# -- clean-credentials --------------------------------------------------------

class TestCleanCredentialsCommand:
    """synckeeper clean-credentials."""

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_deletes_matches(self, mock_run):
        mock_run.side_effect = [
            _completed(stdout="Target: test1\ntarget=user@host\nno match here\n"),
            _completed(),
        ]

        result = _run(["clean-credentials"])

        assert result.exit_code == 0
        assert "user@host" in result.output
        assert "Deleted 1 of 1" in result.output

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_listing_failure_exits_1(self, mock_run):
        mock_run.return_value = _completed(returncode=1, stderr="denied")

        result = _run(["clean-credentials"])

        assert result.exit_code == 1

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_nothing_found_exits_0(self, mock_run):
        mock_run.return_value = _completed(stdout="")

        result = _run(["clean-credentials"])

        assert result.exit_code == 0
        assert "No stored credentials found" in result.output

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_filter_excludes_everything(self, mock_run):
        mock_run.return_value = _completed(stdout="target=a\ntarget=b\n")

        result = _run(["clean-credentials", "--filter", "zzz"])

        assert result.exit_code == 0
        assert "none passed the filter" in result.output
        assert mock_run.call_count == 1

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_filter_from_env(self, mock_run):
        mock_run.side_effect = [_completed(stdout="target=keep\ntarget=drop-me\n"), _completed()]
        env = dict(CLEAN_ENV, SYNCKEEPER_CREDENTIAL_FILTER="drop")

        result = _run(["clean-credentials"], env=env)

        assert result.exit_code == 0
        assert mock_run.call_args_list[1].args[0] == ["cmdkey", "/delete:drop-me"]

    @mock.patch("synckeeper.credentials.cmdkey.subprocess.run")
    def test_dry_run_json(self, mock_run):
        mock_run.return_value = _completed(stdout="target=a\ntarget=b\n")

        result = _run(["clean-credentials", "--dry-run", "--json"])

        data = json.loads(result.output)
        assert data["candidates"] == ["a", "b"]
        assert data["deleted"] == []
        assert data["dry_run"] is True
        assert mock_run.call_count == 1

    def test_bad_pattern_is_usage_error(self):
        with mock.patch("synckeeper.credentials.cmdkey.subprocess.run",
                        return_value=_completed(stdout="target=a\n")):
            result = _run(["clean-credentials", "--pattern", "target=.*"])

        assert result.exit_code == 2
