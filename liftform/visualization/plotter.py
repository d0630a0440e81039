"""
Visualization Utilities
=======================

Core plotting functionality for the report.

"""

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
import pandas as pd
from typing import List, Optional, Union
from pathlib import Path


class Plotter:
    """Handles core plotting functionality."""

    def __init__(self, dpi: int = 150):
        """Initialize plotter with default settings."""
        if 'seaborn-v0_8-darkgrid' in plt.style.available:
            plt.style.use('seaborn-v0_8-darkgrid')
        else:
            plt.style.use('default')

        self.dpi = dpi

        # Set default figure parameters
        plt.rcParams['figure.figsize'] = (10, 6)
        plt.rcParams['font.size'] = 10
        plt.rcParams['axes.labelsize'] = 12
        plt.rcParams['axes.titlesize'] = 14
        plt.rcParams['xtick.labelsize'] = 10
        plt.rcParams['ytick.labelsize'] = 10
        plt.rcParams['legend.fontsize'] = 10

        self.colors = {
            'primary': '#1f77b4',
            'secondary': '#ff7f0e',
            'success': '#2ca02c',
            'danger': '#d62728',
        }

    def save_and_close(self, save_path: Optional[Union[str, Path]] = None) -> None:
        """Save figure and close it."""
        if save_path:
            Path(save_path).parent.mkdir(parents=True, exist_ok=True)
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight', facecolor='white')
        plt.close()

    def plot_variable_importance(self,
                                 importance: pd.DataFrame,
                                 top_n: int = 20,
                                 title: str = 'Variable Importance',
                                 save_path: Optional[Union[str, Path]] = None) -> None:
        """Plot scaled (0-100) importance of the top predictors."""
        data = importance.sort_values('scaled', ascending=False).head(top_n)

        fig_height = max(6, len(data) * 0.3)
        plt.figure(figsize=(10, fig_height))

        y_pos = np.arange(len(data))
        plt.barh(y_pos, data['scaled'].to_numpy(),
                 color=self.colors['primary'],
                 edgecolor='black', linewidth=0.5)

        plt.yticks(y_pos, list(data.index))
        plt.gca().invert_yaxis()
        plt.xlim(0, 105)
        plt.xlabel('Scaled Importance', fontsize=12, fontweight='bold')
        plt.title(f'{title} - Top {len(data)} Predictors', fontsize=16, fontweight='bold', pad=20)
        plt.grid(True, alpha=0.3, axis='x')
        plt.gca().set_axisbelow(True)

        for i, value in enumerate(data['scaled']):
            plt.text(value + 1, i, f'{value:.1f}', va='center', fontsize=9)

        plt.tight_layout()
        self.save_and_close(save_path)

    def plot_cv_accuracy(self,
                         cv_results: pd.DataFrame,
                         title: str = 'Cross-Validated Accuracy',
                         save_path: Optional[Union[str, Path]] = None) -> None:
        """Plot mean CV accuracy against the number of randomly selected predictors."""
        data = cv_results.sort_values('mtry')

        plt.figure(figsize=(8, 5))
        plt.errorbar(data['mtry'], data['accuracy'], yerr=data['accuracy_sd'],
                     color=self.colors['primary'], marker='o', linewidth=2.5, capsize=4)

        plt.xlabel('#Randomly Selected Predictors', fontsize=12, fontweight='bold')
        plt.ylabel('Accuracy (Cross-Validation)', fontsize=12, fontweight='bold')
        plt.title(title, fontsize=16, fontweight='bold', pad=20)
        plt.grid(True, alpha=0.3)
        plt.tight_layout()

        self.save_and_close(save_path)

    def plot_confusion_matrix(self,
                              cm: np.ndarray,
                              labels: Optional[List[str]] = None,
                              title: str = 'Confusion Matrix',
                              save_path: Optional[Union[str, Path]] = None) -> None:
        """Plot confusion matrix heatmap."""
        if labels is None:
            labels = [f'Class {i}' for i in range(cm.shape[0])]

        plt.figure(figsize=(8, 6))

        # Row-normalized; rows without samples stay at zero
        row_sums = cm.sum(axis=1)[:, np.newaxis].astype(float)
        cm_normalized = np.divide(cm, row_sums, out=np.zeros(cm.shape, dtype=float), where=row_sums > 0)

        annotations = np.empty(cm.shape, dtype=object)
        for i in range(cm.shape[0]):
            for j in range(cm.shape[1]):
                annotations[i, j] = f'{cm[i, j]}\n({cm_normalized[i, j]:.1%})'

        sns.heatmap(cm, annot=annotations, fmt='', cmap='Blues',
                    xticklabels=labels, yticklabels=labels,
                    cbar_kws={'label': 'Count'}, square=True)

        plt.title(title, fontsize=16, fontweight='bold', pad=20)
        plt.ylabel('True Label', fontsize=12)
        plt.xlabel('Predicted Label', fontsize=12)
        plt.tight_layout()

        self.save_and_close(save_path)
