import pandas as pd
from pathlib import Path


def results_frame(fit_result, forecast) -> pd.DataFrame:
    """
    One-row table with columns m0, s0, p1..pk, nll, k, volmean, volsd
    """
    record = fit_result.to_record()
    record.update(forecast.to_record())

    return pd.DataFrame([record])


def write_results(fit_result, forecast, path) -> Path:
    path = Path(path)
    if path.parent != Path('.'):
        path.parent.mkdir(parents=True, exist_ok=True)

    results_frame(fit_result, forecast).to_csv(path, index=False)

    return path
