"""
Central configuration constants for the fish tank simulation.

Defines default values, rates, thresholds, and probabilities used across
multiple modules. Every tick is one fixed unit of game time, so all rates
below are "per tick".
"""

# ============================================================================
# Scheduling & Persistence
# ============================================================================

# Wall-clock period between ticks (seconds)
TICK_PERIOD_SECONDS = 1.0

# Single key-value slot holding the whole serialized state
SAVE_KEY = "LAZY_FISH_TANK_SAVE_V1"

# How long BackgroundSaver.flush() waits by default (seconds)
SAVE_FLUSH_TIMEOUT = 5.0


# ============================================================================
# Stat Bounds
# ============================================================================

STAT_MIN = 0.0
STAT_MAX = 100.0

# Tank rectangle creatures wander in (percent of tank width/height)
TANK_BOUNDS_X = (5.0, 90.0)
TANK_BOUNDS_Y = (10.0, 80.0)


# ============================================================================
# Water Quality
# ============================================================================

POLLUTION_PER_CREATURE = 0.5     # Pollution load per living creature
POLLUTION_TO_QUALITY = 0.1       # Quality lost per unit of pollution load
POOR_WATER_THRESHOLD = 50.0      # Below this, creatures take water damage
WATER_DAMAGE_FACTOR = 2.0        # Damage = species sensitivity * factor
PERFECT_WATER = 100.0


# ============================================================================
# Creature Vitals
# ============================================================================

STARVATION_DAMAGE = 5.0          # Health lost on a tick with hunger at 0

# Same-species crowding for the aggressive species
CROWDING_HEALTH_DAMAGE = 10.0
CROWDING_MOOD_DAMAGE = 20.0

# Random walk
MOVE_PROBABILITY = 0.1
MOVE_RANGE_X = 5.0               # dx drawn from [-5, 5]
MOVE_RANGE_Y = 2.5               # dy drawn from [-2.5, 2.5]


# ============================================================================
# Progression
# ============================================================================

PASSIVE_EXP_PER_TICK = 1
LEVEL_EXP_FACTOR = 100           # Level up once exp > level * factor
LEVEL_UP_COIN_BONUS = 10

TANK_EXP_WATER_THRESHOLD = 80.0  # Tank exp accrues while water is above this


# ============================================================================
# Economy & Commands
# ============================================================================

INITIAL_COINS = 500
INITIAL_TANK_LEVEL = 1
INITIAL_WATER_QUALITY = 100.0

FEED_COST = 5
FEED_HUNGER_GAIN = 30.0
FEED_MOOD_GAIN = 10.0
FEED_EXP_GAIN = 5

CLEAN_WATER_COST = 20

BASE_TANK_CAPACITY = 6           # Capacity = base + tank level


# ============================================================================
# Spawning
# ============================================================================

SPAWN_HUNGER = 80.0
SPAWN_MOOD = 80.0
SPAWN_POSITION = (50.0, 50.0)    # Tank center

CREATURE_NAMES = [
    "Bubbles", "Finn", "Dumpling", "Goldie", "Dots",
    "Ruby", "Wave", "Big Eyes", "Drift", "Quirk",
    "Treasure", "Lulu", "Nemo", "Master", "Scrappy",
]


# ============================================================================
# Random Events
# ============================================================================

EVENT_PROBABILITY = 0.01         # Chance per tick when no event is active
EVENT_LIFETIME_SECONDS = 5.0     # Default expires_at offset

# Sweep expired events each tick (False keeps events until resolved)
EVENT_EXPIRY_SWEEP = False

# Event pool selection: 'first' or 'random'
EVENT_SELECTION_DEFAULT = "first"


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100
