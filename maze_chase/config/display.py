"""Display sizing and colour constants."""

# Default window size in pixels used by the pygame front end
SCREEN_WIDTH = 540
SCREEN_HEIGHT = 720

# Height reserved above the maze for the score line
HUD_HEIGHT = 32

# The frame rate for the host loop, in frames per second
FRAME_RATE = 60

# Cell-size search range used when fitting a maze to the available space (pixels)
MIN_CELL_SIZE = 10.0
MAX_CELL_SIZE = 50.0
CELL_SIZE_STEP = 0.5

# Sane grid bounds for the cell-size search
MIN_COLS = 12
MAX_COLS = 45
MIN_ROWS = 15
MAX_ROWS = 55

# Fallback when no candidate cell size fits the bounds
IDEAL_CELL_SIZE = 18.0
FALLBACK_MIN_COLS = 15
FALLBACK_MAX_COLS = 35
FALLBACK_MIN_ROWS = 20
FALLBACK_MAX_ROWS = 45

# Candidate scoring weights
WIDTH_UTILIZATION_WEIGHT = 0.4
HEIGHT_UTILIZATION_WEIGHT = 0.4
FULL_FIT_BONUS = 0.15  # width > 95% and height > 90%
GOOD_FIT_BONUS = 0.10  # both > 90%
CELL_SIZE_BIAS = 0.00001  # per pixel of cell size; only separates near-ties
ASPECT_MISMATCH_PENALTY = 0.5

# Widen the grid when it is narrower than the screen by more than this ratio
ASPECT_WIDEN_TOLERANCE = 0.01
ASPECT_WIDEN_EXTRA_COLS = 2

# Colours (RGB)
BACKGROUND_COLOR = (0, 0, 0)
WALL_COLOR = (20, 10, 40)
WALL_BORDER_COLOR = (168, 85, 247)  # neon purple
PELLET_COLOR = (255, 255, 255)
PLAYER_COLOR = (255, 255, 0)
TEXT_COLOR = (255, 255, 255)
WIN_OVERLAY_COLOR = (250, 204, 21)
GAME_OVER_COLOR = (239, 68, 68)
