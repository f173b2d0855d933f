"""Main CLI entry point for lms-regression"""

import dataclasses
import logging
import warnings
from pathlib import Path
from typing import Optional, Tuple

import click
import pandas as pd

from ..config import LMSConfig, load_config, FAILED_TRIAL_POLICIES, SOLVERS
from ..data import ContaminatedDataGenerator, DataLoader
from ..estimator import LeastMedianSquaresRegression
from ..exceptions import EmptyInlierSetWarning, LMSError
from ..models import DatasetValidator


# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger('lms-cli')


@click.group()
@click.option('--debug/--no-debug', default=False, help='Enable debug logging')
@click.pass_context
def cli(ctx, debug: bool):
    """Least Median of Squares regression"""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
    else:
        logging.getLogger().setLevel(logging.INFO)


def _build_config(config_path: Optional[str], **overrides) -> LMSConfig:
    """Config file values, overridden by options given on the command line"""
    base = load_config(config_path) if config_path else LMSConfig()
    changes = {key: value for key, value in overrides.items() if value is not None}
    return dataclasses.replace(base, **changes).validate()


@cli.command()
@click.option('--input', '-i', 'input_path', type=click.Path(exists=True, dir_okay=False), required=True,
              help='Training CSV file')
@click.option('--target', '-t', default=None, help='Target column (default: last column)')
@click.option('--sample-size', '-S', type=int, default=None, help='Subsample size (default: 4)')
@click.option('--random', '-R', 'random_sampling', is_flag=True, default=False,
              help='Seed sampling from system entropy')
@click.option('--seed', '-G', type=int, default=None, help='Seed used to generate samples (default: 0)')
@click.option('--trace', '-D', 'debug_trace', is_flag=True, default=False, help='Log search progress')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.option('--policy', type=click.Choice(FAILED_TRIAL_POLICIES), default=None,
              help='What to do when a trial subset is singular')
@click.option('--solver', type=click.Choice(SOLVERS), default=None, help='Linear solver (default: ridge)')
@click.option('--jobs', '-j', type=int, default=None, help='Threads used for trials')
@click.option('--drop', multiple=True, help='Column to ignore (repeatable)')
@click.option('--weights-out', type=click.Path(dir_okay=False), help='Write per-row weights to CSV')
@click.option('--predictions-out', type=click.Path(dir_okay=False), help='Write training predictions to CSV')
@click.pass_context
def fit(ctx, input_path: str, target: Optional[str], sample_size: Optional[int],
        random_sampling: bool, seed: Optional[int], debug_trace: bool,
        config_path: Optional[str], policy: Optional[str], solver: Optional[str],
        jobs: Optional[int], drop: Tuple[str, ...], weights_out: Optional[str],
        predictions_out: Optional[str]):
    """Fit an LMS regression model to a CSV file"""
    try:
        config = _build_config(
            config_path,
            subsample_size=sample_size,
            random_sampling=True if random_sampling else None,
            random_seed=seed,
            debug_trace=True if debug_trace else None,
            failed_trial_policy=policy,
            solver=solver,
            n_jobs=jobs
        )

        loader = DataLoader()
        df = loader.load_training_data(input_path, target=target, drop_columns=list(drop))
        target = df.columns[-1]
        logger.info(f"Loaded {len(df)} rows from {input_path}, target '{target}'")

        is_valid, problems = DatasetValidator.validation_report(df, target)
        if not is_valid:
            for problem in problems:
                logger.warning(f"Data check: {problem}")

        estimator = LeastMedianSquaresRegression(config)
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', EmptyInlierSetWarning)
            estimator.fit(df, target)
    except LMSError as e:
        raise click.ClickException(str(e))

    click.echo(estimator.describe())

    if weights_out:
        stats = estimator.get_influence_statistics()
        loader.save_frame(stats, weights_out)
        logger.info(f"Weights saved to {weights_out}")

    if predictions_out:
        predictions = pd.DataFrame({
            'actual': df[target],
            'predicted': estimator.predict(df)
        })
        loader.save_frame(predictions, predictions_out)
        logger.info(f"Predictions saved to {predictions_out}")


@cli.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False), required=True, help='Output CSV file')
@click.option('--rows', default=100, type=int, help='Number of rows')
@click.option('--features', default=1, type=int, help='Number of features')
@click.option('--outlier-fraction', default=0.2, type=float, help='Share of contaminated rows')
@click.option('--noise', default=0.1, type=float, help='Noise std on clean rows')
@click.option('--seed', default=42, type=int, help='Random seed')
@click.option('--keep-labels/--no-labels', default=False, help='Keep the is_outlier column')
def generate(output: str, rows: int, features: int, outlier_fraction: float,
             noise: float, seed: int, keep_labels: bool):
    """Generate a synthetic contaminated dataset"""
    logger.info("Generating synthetic data")

    generator = ContaminatedDataGenerator(seed=seed)
    try:
        df = generator.generate(
            n_rows=rows,
            n_features=features,
            intercept=1.0,
            noise_std=noise,
            outlier_fraction=outlier_fraction
        )
    except ValueError as e:
        raise click.BadParameter(str(e))

    if not keep_labels:
        df = df.drop(columns=['is_outlier'])

    path = DataLoader().save_frame(df, Path(output))
    click.echo(f"Wrote {len(df)} rows to {path}")


def main():
    cli(obj={})


if __name__ == '__main__':
    main()
