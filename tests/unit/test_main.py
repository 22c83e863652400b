"""
Unit Tests for the Command Line Entry Point
"""

import logging

import pytest

from rkode.common.config import CONFIG_ENV_VAR
from rkode.main import build_parser, main


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run without any ambient configuration file and reset logging afterwards"""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    logger = logging.getLogger('rkode')
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


class TestParser:
    """Tests for argument parsing"""

    def test_overrides(self):
        args = build_parser().parse_args(
            ['--method', 'gauss', '--problem', 'harmonic', '--mu', '0.5', '--x-stop', '3']
        )
        assert args.method == 'gauss'
        assert args.problem == 'harmonic'
        assert args.mu == 0.5
        assert args.x_stop == 3.0
        assert not args.json_logs

    def test_unknown_method(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--method', 'euler'])


class TestMain:
    """Tests for complete runs"""

    def test_successful_run(self, capsys):
        code = main(['--problem', 'decay', '--method', 'irk4', '--x-stop', '1.0'])

        out = capsys.readouterr().out
        assert code == 0
        assert "Number of integration points" in out
        assert "Final state at x = 1.0" in out

    def test_van_der_pol_from_config(self, tmp_path, capsys):
        path = tmp_path / "vdp.yml"
        path.write_text(
            "problem: van_der_pol\n"
            "mu: 1.0\n"
            "integration:\n"
            "  x_stop: 2.0\n"
            "  absolute_tolerance: 1.0e-6\n"
            "method:\n"
            "  name: dirk3\n"
        )
        code = main(['--config', str(path)])

        assert code == 0
        assert "DIRK3" in capsys.readouterr().out

    def test_json_logs(self, capsys):
        code = main(['--problem', 'decay', '--x-stop', '0.5', '--json-logs'])

        lines = capsys.readouterr().out.strip().splitlines()
        assert code == 0
        assert all(line.startswith('{') for line in lines)

    def test_missing_config_file(self, tmp_path, capsys):
        code = main(['--config', str(tmp_path / "missing.yml")])

        assert code == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_unknown_problem_in_config(self, tmp_path, capsys):
        path = tmp_path / "bad.yml"
        path.write_text("problem: lorenz\n")

        assert main(['--config', str(path)]) == 1
        assert "Unknown problem" in capsys.readouterr().out

    def test_integration_failure(self, tmp_path, capsys):
        path = tmp_path / "plateau.yml"
        path.write_text(
            "problem: decay\n"
            "integration:\n"
            "  h_init: 0.5\n"
            "method:\n"
            "  name: erk4\n"
            "  h_min: 1.0\n"
            "  h_max: 1.0\n"
        )

        assert main(['--config', str(path)]) == 1
        assert "plateaued" in capsys.readouterr().out
