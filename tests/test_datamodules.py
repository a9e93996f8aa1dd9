"""
Tests for CSV input/output and the command-line entry point
"""
import numpy as np
import pandas as pd
import pytest

from msmbt.cli import main
from msmbt.datamodules import ReturnsDataloader, results_frame, write_results
from msmbt.estimation import FitResult
from msmbt.forecasting import ForecastResult


@pytest.fixture
def returns_csv(tmp_path, k1_returns):
    path = tmp_path / "returns.csv"
    pd.Series(k1_returns[:300] + 0.001).to_csv(path, header=False, index=False)
    return path


def make_fit(gamma):
    return FitResult(
        m0=1.4, s0=0.02, gamma=np.array(gamma), nll=-1234.5, kbar=len(gamma),
        converged=True, status=0, message="ok", n_iterations=10, n_evaluations=20,
        x=np.zeros(len(gamma) + 2)
    )


class TestDataloader:

    def test_demeans_first_column(self, returns_csv, k1_returns):
        loader = ReturnsDataloader(returns_csv)
        ret = loader.get_returns_array()

        assert ret.shape == (300,)
        assert abs(ret.mean()) < 1e-12
        assert loader.mean == pytest.approx(np.mean(k1_returns[:300]) + 0.001)

    def test_keep_mean(self, returns_csv):
        ret = ReturnsDataloader(returns_csv, demean=False).get_returns_array()
        assert ret.mean() == pytest.approx(ReturnsDataloader(returns_csv).mean)

    def test_non_numeric_rows(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("0.01\nabc\n0.02\n")

        with pytest.raises(ValueError, match="row 2"):
            ReturnsDataloader(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ReturnsDataloader(tmp_path / "nope.csv")


class TestWriter:

    def test_header_layout(self, tmp_path):
        forecast = ForecastResult(mean=0.021, std_error=0.0004, n_paths=200, window=30)
        path = write_results(make_fit([0.1, 0.3, 0.7]), forecast, tmp_path / "out" / "res.csv")

        df = pd.read_csv(path)
        assert list(df.columns) == ["m0", "s0", "p1", "p2", "p3", "nll", "k", "volmean", "volsd"]
        assert df.loc[0, "k"] == 3
        assert df.loc[0, "p3"] == pytest.approx(0.7)
        assert df.loc[0, "volsd"] == pytest.approx(0.0004)

    def test_frame_has_one_row(self):
        forecast = ForecastResult(mean=0.02, std_error=0.001, n_paths=100, window=30)
        assert len(results_frame(make_fit([0.2]), forecast)) == 1


class TestCli:

    def test_end_to_end(self, returns_csv, tmp_path, capsys):
        out = tmp_path / "results.csv"
        code = main(["-k", "1", "-w", "30", "-n", "100", "-i", str(returns_csv), "-o", str(out),
                     "--seed", "3", "--maxiter", "300"])

        assert code == 0
        df = pd.read_csv(out)
        assert list(df.columns) == ["m0", "s0", "p1", "nll", "k", "volmean", "volsd"]
        assert 1.0 < df.loc[0, "m0"] < 2.0
        assert df.loc[0, "volmean"] > 0
        assert "Wrote results to" in capsys.readouterr().out

    def test_invalid_dimension_exits_nonzero(self, returns_csv, tmp_path, capsys):
        code = main(["-k", "0", "-i", str(returns_csv), "-o", str(tmp_path / "r.csv")])

        assert code == 1
        assert "k (model dimension)" in capsys.readouterr().err
        assert not (tmp_path / "r.csv").exists()

    def test_missing_input_exits_nonzero(self, tmp_path):
        code = main(["-k", "1", "-i", str(tmp_path / "missing.csv"), "-o", str(tmp_path / "r.csv"), "--quiet"])
        assert code == 1

    def test_quiet_silences_convergence_warning(self, returns_csv, tmp_path, capsys, recwarn):
        out = tmp_path / "results.csv"
        code = main(["-k", "1", "-i", str(returns_csv), "-o", str(out),
                     "--seed", "3", "--maxiter", "3", "--quiet"])

        assert code == 0
        assert out.exists()
        assert not [w for w in recwarn if issubclass(w.category, RuntimeWarning)]
        assert capsys.readouterr().out == ""

    def test_non_convergence_warns_without_quiet(self, returns_csv, tmp_path):
        with pytest.warns(RuntimeWarning, match="did not converge"):
            code = main(["-k", "1", "-i", str(returns_csv), "-o", str(tmp_path / "r.csv"),
                         "--seed", "3", "--maxiter", "3"])
        assert code == 0
