"""
main.py CLI 테스트
"""
import pytest

import main
from nizkp.backend import ProofMetrics


class TestParseArgs:
    def test_defaults(self):
        args = main.parse_args([])
        assert args.rounds == 255
        assert args.samples == 0
        assert args.backend == "all"
        assert not args.verbose

    def test_options(self):
        args = main.parse_args(["--rounds", "7", "--samples", "3", "--backend", "stark", "-v"])
        assert (args.rounds, args.samples, args.backend, args.verbose) == (7, 3, "stark", True)

    def test_unknown_backend(self):
        with pytest.raises(SystemExit):
            main.parse_args(["--backend", "plonk"])


class TestFormatMetrics:
    def test_with_security(self):
        text = main.format_metrics(ProofMetrics(100, 50, 116, 78))
        assert "Size runtime (bytes): 100" in text
        assert "Size serialized (bytes): 50" in text
        assert "Security level (bits): 116 conjectured, 78 proven" in text

    def test_without_security(self):
        text = main.format_metrics(ProofMetrics(10, 5))
        assert "? conjectured, ? proven" in text


class TestMain:
    def test_stark_run(self, capsys):
        assert main.main(["--rounds", "7", "--backend", "stark", "--samples", "1"]) == 0
        out = capsys.readouterr().out
        assert "Running zk-STARK MiMC hash..." in out
        assert "zk-STARK MiMC hash done!" in out
        assert "Average proving time (1 samples)" in out
        assert "121 conjectured, 78 proven" in out

    def test_bad_rounds(self, capsys):
        assert main.main(["--rounds", "6", "--backend", "stark"]) == 1
        assert "Running" not in capsys.readouterr().out
