"""
Visualization utilities.

Responsibility: plots only. No timing, no sieving.
"""

import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional


def plot_timings(df: pd.DataFrame, output_path: Optional[Path] = None) -> plt.Figure:
    """
    Plot median time against prime count, one panel per candidate source.

    Parameters
    ----------
    df : pd.DataFrame
        DataFrame from run_benchmark with columns: sieve, source, count,
        median_s.
    output_path : Path, optional
        If provided, save figure to this path.

    Returns
    -------
    matplotlib.Figure
    """
    sources = list(df['source'].unique())
    fig, axes = plt.subplots(1, len(sources), figsize=(6 * len(sources), 5),
                             squeeze=False)

    for idx, source in enumerate(sources):
        ax = axes[0, idx]
        source_df = df[df['source'] == source]

        for sieve, sieve_df in source_df.groupby('sieve'):
            sieve_df = sieve_df.sort_values('count')
            ax.plot(sieve_df['count'], sieve_df['median_s'], 'o-', label=sieve)

        ax.set_xlabel('Primes pulled')
        ax.set_ylabel('Median time (s)')
        ax.set_title(source)
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if output_path:
        fig.savefig(output_path, dpi=150, bbox_inches='tight')

    return fig
