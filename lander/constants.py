"""Physical and simulation constants for the 2D lander.

Units follow the simulation convention:
- Positions are in screen pixels (x grows right, y grows DOWN), 0 to 1024
- Velocities are in m/s with vertical velocity positive UP
- Angles are in degrees measured clockwise from vertical (0 = upright)

One metre spans S_SCALE pixels, so a displacement in pixels over one step is
velocity * T_STEP * S_SCALE.
"""

# =============================================================================
# Dynamics
# =============================================================================

G_ACCEL = 8.87          # Gravitational acceleration [m/s^2]
MT_ACCEL = 35.0         # Max acceleration from the main thruster [m/s^2]
RT_ACCEL = 25.0         # Max acceleration from the right thruster [m/s^2]
LT_ACCEL = 25.0         # Max acceleration from the left thruster [m/s^2]
MAX_ROT_RATE = 0.075    # Max rotation per step [rad]

# =============================================================================
# Noise
# =============================================================================

NP1 = 0.05              # Relative thrust noise
NP2 = 0.05              # Relative rotation noise

# =============================================================================
# Timing and scale
# =============================================================================

T_STEP = 0.005          # Simulation time step [s]
S_SCALE = 5.0           # Pixels per metre

# =============================================================================
# Sensors and world
# =============================================================================

SONAR_BINS = 36         # One bin every 10 degrees, clockwise from vertical
SONAR_INVALID = -1.0    # Sentinel for "no valid return"
WORLD_SIZE = 1024.0     # Width and height of the world [px]

# =============================================================================
# Touchdown tolerances
# =============================================================================

MAX_LANDING_SPEED = 10.0    # Max vertical speed at touchdown [m/s]
MAX_LANDING_ANGLE = 15.0    # Max deviation from upright at touchdown [deg]
