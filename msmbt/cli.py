import argparse
import sys
import warnings

import numpy as np

from msmbt.config import ConfigurationError, MSMConfig
from msmbt.datamodules import ReturnsDataloader, write_results
from msmbt.estimation import EstimationError, EstimationOptions, MSMEstimator
from msmbt.forecasting import MSMForecaster


def build_parser():
    parser = argparse.ArgumentParser(
        prog="msmbt",
        description="Fit an MSM-BT volatility model to a return series and forecast volatility"
    )
    parser.add_argument("-k", type=int, required=True,
                        help="MSM model dimension, +ve integer, caution: k > 10 can take minutes to run")
    parser.add_argument("-w", type=int, default=30,
                        help="Time window for vol prediction in number of bars, minimum 30")
    parser.add_argument("-n", type=int, default=200,
                        help="Number of simulations for computing mean and std dev of vol estimate, minimum 100")
    parser.add_argument("-i", required=True, help="Name of csv file containing return data")
    parser.add_argument("-o", default="results.csv", help="Name of output file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--starts", type=int, default=1, help="Number of optimizer starts")
    parser.add_argument("--maxiter", type=int, default=5000, help="Maximum simplex iterations per start")
    parser.add_argument("--no-demean", action="store_true", help="Do not subtract the sample mean")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress output and warnings")
    return parser


def run(config: MSMConfig, infile, outfile, options: EstimationOptions, demean=True):
    rng = np.random.default_rng(config.seed)

    ret = ReturnsDataloader(infile, demean=demean).get_returns_array()

    fit = MSMEstimator(config.k, options=options, rng=rng, max_k=config.max_k).estimate(ret)
    forecast = MSMForecaster(fit.parameters, rng=rng).forecast(
        window=config.window, n_paths=config.samples, verbose=options.verbose
    )

    return fit, forecast, write_results(fit, forecast, outfile)


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        with warnings.catch_warnings():
            # --quiet silences advisory and convergence warnings alike
            if args.quiet:
                warnings.simplefilter("ignore")
            else:
                warnings.simplefilter("default", UserWarning)
            config = MSMConfig(k=args.k, window=args.w, samples=args.n, seed=args.seed)
            options = EstimationOptions(maxiter=args.maxiter, n_starts=args.starts, verbose=not args.quiet)
            _, _, path = run(config, args.i, args.o, options, demean=not args.no_demean)
    except (ConfigurationError, ValueError, EstimationError, OSError) as e:
        print(f"msmbt: error: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        print(f"Wrote results to {path}")
    return 0
