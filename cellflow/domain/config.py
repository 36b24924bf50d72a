# Simulation Configuration

# Grid Settings
SCALE = 10               # Pixels per cell (one car length)
VIEWPORT_HEIGHT = 640
VIEWPORT_WIDTH = 640
MIN_GRID_SIZE = 6        # Smallest grid that fits roads + light decoration

# Vehicle Physics
V_MAX = 4                # Cells per iteration

# Signal Timings (iterations)
TIME_ORANGE = 2
TIME_STABLE = 5          # Classic controller only

# Adaptive Controller Defaults
DEFAULT_POWER = 0.8
DEFAULT_THRESHOLD = 5.0

# Experiment Settings
NUM_EXP = 10             # Runs averaged per vehicle count
MAX_STEPS_PER_RUN = 10000
POWER_LIMIT = 2.0
POWER_STEP = 0.5
POWER_RESET = 0.5
THRESHOLD_STEP = 10.0
