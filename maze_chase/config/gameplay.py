"""Gameplay rules: scoring, pacing, footprints and ghost AI tuning."""

# Collision ruleset. "eat_ghosts": touching a ghost eats it and scores.
# The older "collision is fatal" ruleset is not implemented.
RULESET = "eat_ghosts"

# Fixed simulation tick, in milliseconds
TICK_DURATION_MS = 180

# Scoring
PELLET_REWARD = 10
GHOST_EATEN_REWARD = 200

# Eaten-ghost message and the delay before the win overlay appears
MESSAGE_DURATION_MS = 1000
WIN_GRACE_PERIOD_MS = 1000

# Footprints (cells). Player width is floor(height * aspect ratio).
PLAYER_HEIGHT = 2
PLAYER_ASPECT_RATIO = 1.5
GHOST_SIZE = 2

# Ghost pool
GHOST_POOL_SIZE = 8
INITIAL_ACTIVE_GHOSTS = 2

# Ghosts sit out every Nth tick, making them slower than the player
GLOBAL_GHOST_SKIP_PERIOD = 5

# Slow mover additionally sits out every other eligible tick
SLOW_MOVER_SKIP_PERIOD = 2

# Wanderer: chance of fleeing rather than moving randomly
WANDERER_FLEE_CHANCE = 0.6

# Patrols: chance of restricting to their preferred axis
PATROL_AXIS_CHANCE = 0.8

# Erratic: forced turn every 2-4 of its own ticks; chance to allow reversing
ERRATIC_MIN_TURN_INTERVAL = 2
ERRATIC_MAX_TURN_INTERVAL = 4
ERRATIC_REVERSE_CHANCE = 0.3

# Corner hugger: score = EDGE_SCORE_BASE - edge distance + weight * player distance^2
CORNER_EDGE_SCORE_BASE = 100
CORNER_PLAYER_DISTANCE_WEIGHT = 0.1

# Zigzag: axis preference flips every ZIGZAG_PHASE_LENGTH of its ticks
ZIGZAG_PHASE_LENGTH = 2

# Distance keeper thresholds (squared cell distances)
DISTANCE_KEEPER_TOO_CLOSE_SQ = 36
DISTANCE_KEEPER_IDEAL_SQ = 64

# Where the player starts, as fractions of (cols, rows)
PLAYER_START_COL_FRACTION = 0.5
PLAYER_START_ROW_FRACTION = 0.85

# Ghost spawn used when the maze has no spawn cells
FALLBACK_SPAWN_ROW_FRACTION = 0.3
