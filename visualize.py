from __future__ import annotations

from typing import Optional, Sequence

import matplotlib.pyplot as plt

import settings
from matrix import Matrix4x4


def plot_transform(m: Matrix4x4, ax: Optional[plt.Axes] = None, scale: float = 1.0, label: Optional[str] = None) -> plt.Axes:
    """Plot the coordinate system of a transform in the xy plane.
    The x and y unit vectors (red and green) are drawn from the transformed origin to the transformed unit points.
    """
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(111)
    origin = m.transform_point((0, 0, 0))
    unit_points = [m.transform_point((scale, 0, 0)), m.transform_point((0, scale, 0))]
    for point, color in zip(unit_points, settings.AXIS_COLORS):
        ax.quiver(origin.x, origin.y, point.x - origin.x, point.y - origin.y, color=color,
                  angles='xy', scale_units='xy', scale=1)
    if label is not None:
        ax.text(origin.x, origin.y, label, color='gray')
    return ax


def plot_transforms(matrices: Sequence[Matrix4x4], labels: Optional[Sequence[str]] = None, scale: float = 1.0,
                    show: bool = False) -> plt.Axes:
    """Plot several transforms into one figure, labelled with their position in the list by default"""
    if labels is not None and len(labels) != len(matrices):
        raise ValueError(f"Got {len(labels)} labels for {len(matrices)} matrices")
    fig = plt.figure()
    ax = fig.add_subplot(111)
    ax.set_xlabel('X')
    ax.set_ylabel('Y')
    ax.set_xlim(*settings.PLOT_LIMITS)
    ax.set_ylim(*settings.PLOT_LIMITS)
    ax.set_aspect('equal')
    ax.set_title('Visualizing Transforms')
    for i, m in enumerate(matrices):
        plot_transform(m, ax, scale=scale, label=labels[i] if labels is not None else str(i + 1))
    if show:
        plt.show()
    return ax
