import pandas as pd
import numpy as np


class ReturnsDataloader:
    def __init__(self, path, column: int = 0, demean: bool = True):
        # Headerless CSV, one return per row in `column`
        df = pd.read_csv(path, header=None, usecols=[column])

        ret = pd.to_numeric(df[column], errors='coerce')

        if ret.isna().any():
            bad = int(ret.isna().idxmax()) + 1
            raise ValueError(f"Non-numeric or missing return in {path} at row {bad}")
        if len(ret) == 0:
            raise ValueError(f"No returns found in {path}")

        self.mean = float(ret.mean())

        if demean and self.mean != 0.0:
            ret = ret - self.mean

        # Store the processed series
        self._data = ret.rename('return').reset_index(drop=True)

    def get_returns_array(self) -> np.ndarray:
        """
        Returns the (de-meaned) returns as a numpy array of shape (T,),
        ready for modeling (e.g., passing to MSM).
        """
        return self._data.values.astype(float)
