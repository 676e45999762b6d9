"""Flight visualization.

Plotting utilities for completed landing attempts.

Example:
    >>> from lander import fly
    >>> from lander.results import plot_trajectory, plot_state_history
    >>>
    >>> result = fly(sim, computer)
    >>> fig = plot_trajectory(result, sim.terrain)
    >>> fig = plot_state_history(result)
"""

import matplotlib.pyplot as plt
import numpy as np
from beartype import beartype
from matplotlib.figure import Figure

from lander.constants import MAX_LANDING_SPEED
from lander.environment.terrain import Terrain
from lander.simulation.simulator import LandingOutcome, SimulationResult

# =============================================================================
# Plot Style Configuration
# =============================================================================

COLORS = {
    "primary": "#2E86AB",
    "secondary": "#A23B72",
    "accent": "#F18F01",
    "ground": "#8D6E63",
    "platform": "#2A9D8F",
    "crash": "#E63946",
    "grid": "#CCCCCC",
}

OUTCOME_COLORS = {
    LandingOutcome.LANDED: COLORS["platform"],
    LandingOutcome.CRASHED: COLORS["crash"],
    LandingOutcome.FLYING: COLORS["accent"],
}


def _setup_style() -> None:
    """Configure matplotlib style for consistent appearance."""
    plt.rcParams.update({
        "font.family": "sans-serif",
        "font.sans-serif": ["Helvetica", "Arial", "DejaVu Sans"],
        "font.size": 11,
        "axes.titlesize": 14,
        "axes.labelsize": 12,
        "legend.fontsize": 10,
        "grid.alpha": 0.5,
    })


# =============================================================================
# Trajectory
# =============================================================================


@beartype
def plot_trajectory(
    result: SimulationResult,
    terrain: Terrain | None = None,
    figsize: tuple[float, float] = (9.0, 9.0),
    title: str | None = None,
) -> Figure:
    """Plot the flight path in screen coordinates.

    Args:
        result: Completed flight
        terrain: Ground profile to draw under the path
        figsize: Figure size (width, height)
        title: Optional plot title

    Returns:
        matplotlib Figure
    """
    _setup_style()
    fig, ax = plt.subplots(figsize=figsize)

    if terrain is not None:
        columns = np.arange(len(terrain.heights))
        ax.fill_between(columns, terrain.heights, terrain.heights.max() + 20.0,
                        color=COLORS["ground"], alpha=0.6, label="Ground")

    platform = result.platform
    ax.plot([platform.x - 50.0, platform.x + 50.0], [platform.y, platform.y],
            color=COLORS["platform"], linewidth=4, label="Platform")

    ax.plot(result.x, result.y, color=COLORS["primary"], linewidth=1.5, label="Path")
    ax.scatter([result.x[0]], [result.y[0]], color=COLORS["secondary"], s=60, zorder=3, label="Start")
    ax.scatter([result.x[-1]], [result.y[-1]], color=OUTCOME_COLORS[result.outcome], s=120,
               marker="*", zorder=3, label=result.outcome.value.capitalize())

    # Screen y grows downward
    ax.invert_yaxis()
    ax.set_aspect("equal", adjustable="datalim")
    ax.set_xlabel("x [px]")
    ax.set_ylabel("y [px]")
    ax.set_title(title or "Landing Trajectory")
    ax.grid(True, alpha=0.3)
    ax.legend(loc="upper right")

    fig.tight_layout()
    return fig


@beartype
def plot_state_history(
    result: SimulationResult,
    figsize: tuple[float, float] = (12.0, 8.0),
) -> Figure:
    """Plot velocities, orientation and distance to platform over time.

    Args:
        result: Completed flight
        figsize: Figure size

    Returns:
        matplotlib Figure with a 2x2 grid of axes
    """
    _setup_style()
    fig, axes = plt.subplots(2, 2, figsize=figsize, sharex=True)
    t = result.time

    ax = axes[0, 0]
    ax.plot(t, result.vx, color=COLORS["primary"])
    ax.set_ylabel("vx [m/s]")
    ax.set_title("Horizontal Velocity")

    ax = axes[0, 1]
    ax.plot(t, result.vy, color=COLORS["primary"])
    ax.axhline(-MAX_LANDING_SPEED, color=COLORS["crash"], linestyle="--", label="Touchdown limit")
    ax.set_ylabel("vy [m/s]")
    ax.set_title("Vertical Velocity")
    ax.legend()

    ax = axes[1, 0]
    # Show orientation as signed tilt for readability
    ax.plot(t, np.where(result.angle > 180.0, result.angle - 360.0, result.angle),
            color=COLORS["secondary"])
    ax.set_ylabel("angle [deg]")
    ax.set_xlabel("Time [s]")
    ax.set_title("Orientation")

    ax = axes[1, 1]
    ax.plot(t, result.horizontal_offset, color=COLORS["primary"], label="dx")
    ax.plot(t, result.height_above_platform, color=COLORS["accent"], label="dy")
    ax.set_ylabel("[px]")
    ax.set_xlabel("Time [s]")
    ax.set_title("Offset From Platform")
    ax.legend()

    for ax in axes.flat:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()
    return fig
