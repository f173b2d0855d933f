#!/usr/bin/env python3
"""Script to generate contaminated regression datasets for manual testing"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from lms_regression.data import ContaminatedDataGenerator
from lms_regression.models.validators import DatasetValidator
import pandas as pd


DATASETS = {
    'line_small': dict(n_rows=20, n_features=1, coefficients=[2.0], intercept=1.0,
                       noise_std=0.0, outlier_fraction=0.1),
    'plane_noisy': dict(n_rows=500, n_features=2, coefficients=[1.5, -0.5], intercept=4.0,
                        noise_std=0.2, outlier_fraction=0.3),
    'wide': dict(n_rows=2000, n_features=6, intercept=-3.0,
                 noise_std=0.5, outlier_fraction=0.2),
}


def main():
    """Generate test datasets"""
    print("LMS Regression Test Data Generator")
    print("=" * 50)

    output_dir = Path(__file__).parent.parent / 'data' / 'test'
    output_dir.mkdir(parents=True, exist_ok=True)

    generator = ContaminatedDataGenerator(seed=42)
    summary = []

    for name, params in DATASETS.items():
        print(f"\nGenerating {name}...")
        df = generator.generate(**params)

        is_valid, errors = DatasetValidator.validation_report(df.drop(columns=['is_outlier']), 'y')
        if not is_valid:
            print(f"  Validation errors: {errors}")

        df.to_csv(output_dir / f'{name}.csv', index=False)
        summary.append({
            'dataset': name,
            'rows': len(df),
            'features': params['n_features'],
            'outliers': int(df['is_outlier'].sum()),
            'valid': is_valid
        })

    summary_df = pd.DataFrame(summary)
    summary_df.to_csv(output_dir / 'summary.csv', index=False)

    print(f"\nData saved to: {output_dir}")
    print("\nDataset Summary:")
    print(summary_df.to_string(index=False))


if __name__ == '__main__':
    main()
