"""
Tests for the command-line front end.
"""

import json

import pytest

from contrastpower.cli import build_parser, configure_study, main
from contrastpower.core.results import HEADER

SMALL = [
    "--generators", "Linear,Independent",
    "--dimensions", "2,4",
    "--diluted-dimensions", "4",
    "--noise-levels", "2",
    "--observation-counts", "30",
    "--slice-techniques", "c",
    "--power-simulations", "10",
    "--calibration-simulations", "20",
    "--no-parallel",
    "--seed", "5",
    "--quiet",
]


class TestParser:
    def test_lists(self, tmp_path):
        args = build_parser().parse_args([str(tmp_path / "out.csv"), "--dimensions", "2,4,8", "--slice-techniques", "c,u"])
        assert args.dimensions == [2, 4, 8]
        assert args.slice_techniques == ["c", "u"]

    def test_bad_int_list(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            main([str(tmp_path / "out.csv"), "--dimensions", "two"])
        assert info.value.code == 2

    def test_missing_output(self):
        with pytest.raises(SystemExit) as info:
            main([])
        assert info.value.code == 2

    def test_parallel_flags_exclusive(self, tmp_path):
        with pytest.raises(SystemExit) as info:
            main([str(tmp_path / "out.csv"), "--n-cores", "2", "--no-parallel"])
        assert info.value.code == 2


class TestConfigureStudy:
    def test_flags_applied(self, tmp_path):
        args = build_parser().parse_args([str(tmp_path / "out.csv")] + SMALL)
        study = configure_study(args)
        assert [g.name for g in study.generators] == ["Linear", "Independent"]
        assert study.dimensions == [2, 4]
        assert study.diluted_dimensions == [4]
        assert study.noises == [0.0, 0.5, 1.0]
        assert study.n_cores == 1
        assert study.seed == 5

    def test_flags_override_config(self, tmp_path):
        config = tmp_path / "study.json"
        config.write_text(json.dumps({"estimator": "MWP", "seed": 1, "observation_counts": [200]}))
        args = build_parser().parse_args([str(tmp_path / "out.csv"), "--config", str(config), "--seed", "9"])
        study = configure_study(args)
        assert study.estimator == "MWP"
        assert study.observation_counts == [200]
        assert study.seed == 9

    def test_diluted_only(self, tmp_path):
        args = build_parser().parse_args([str(tmp_path / "out.csv"), "--diluted-dimensions", "8"])
        study = configure_study(args)
        assert study.dimensions == [2, 4, 8, 12, 16]
        assert study.diluted_dimensions == [8]


class TestMain:
    def test_success(self, tmp_path):
        out = tmp_path / "summary.csv"
        assert main([str(out)] + SMALL) == 0
        lines = out.read_text().splitlines()
        assert lines[0] == ",".join(HEADER)
        assert len(lines) == 1 + 18

    def test_unknown_generator(self, tmp_path, capsys):
        assert main([str(tmp_path / "out.csv"), "--generators", "Spiral", "--quiet"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_study_failure(self, tmp_path, capsys):
        out = tmp_path / "summary.csv"
        code = main([str(out)] + SMALL + ["--measure", "tests.helpers.measures:failing_measure"])
        assert code == 1
        err = capsys.readouterr().err
        assert "Error: calibration cell failed" in err
        assert out.read_text().splitlines() == [",".join(HEADER)]

    def test_bad_measure_path(self, tmp_path, capsys):
        assert main([str(tmp_path / "out.csv"), "--measure", "nonsense", "--quiet"]) == 1
        assert "module:attribute" in capsys.readouterr().err

    def test_verbose(self, tmp_path, capsys):
        small = [arg for arg in SMALL if arg != "--quiet"]
        assert main([str(tmp_path / "out.csv")] + small + ["--verbose"]) == 0
        err = capsys.readouterr().err
        assert "now computing thresholds" in err
        assert "Progress: 100.0% (18/18 cells)" in err
