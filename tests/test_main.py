#!/usr/bin/env python3
"""
Tests for the command-line runner.
"""

import pytest

from hylaean.main import build_parser, main


class TestCommandLine:
    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.num == 100
        assert args.steps == 10000
        assert args.dt == 10.0
        assert args.threshold == 100_000.0
        assert args.storage == "dense"
        assert args.generator == "circular"

    def test_headless_run(self, capsys):
        exit_code = main(["--num", "6", "--steps", "3", "--seed", "4", "--report-every", "1"])
        out = capsys.readouterr().out

        assert exit_code == 0
        assert "Simulation Complete!" in out
        assert "Steps executed: 3" in out

    def test_sparse_threaded_grid_run(self, capsys):
        exit_code = main([
            "--num", "8",
            "--steps", "2",
            "--storage", "sparse",
            "--workers", "2",
            "--proximity-method", "grid",
            "--generator", "eccentric",
            "--seed", "1",
        ])
        assert exit_code == 0
        assert "Storage: sparse, workers: 2" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv",
        [
            ["--workers", "0"],
            ["--dt", "-5"],
            ["--steps", "-1"],
            ["--storage", "columnar"],
        ],
    )
    def test_invalid_arguments_exit(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            main(argv)
        assert excinfo.value.code == 2
