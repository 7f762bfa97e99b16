"""
Tick resolver: the per-tick state transition.

advance() is a pure function of the current state. Every call is exactly one
fixed unit of game time regardless of wall-clock jitter; `now` is only used
to stamp last_tick. Randomness comes from the injected generator, so a seeded
run is reproducible.

Phase order (fixed, outputs depend on it):
    1. Water quality update from living population
    2. Aggression precompute (crowding of the aggressive species)
    3. Per-creature update: decay, random walk, damage, death,
       decoration bonus, passive exp / level-up
    4. Tank experience
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from .catalog import SpeciesCatalog
from .constants import (
    POLLUTION_PER_CREATURE,
    POLLUTION_TO_QUALITY,
    POOR_WATER_THRESHOLD,
    WATER_DAMAGE_FACTOR,
    STARVATION_DAMAGE,
    CROWDING_HEALTH_DAMAGE,
    CROWDING_MOOD_DAMAGE,
    MOVE_PROBABILITY,
    MOVE_RANGE_X,
    MOVE_RANGE_Y,
    TANK_BOUNDS_X,
    TANK_BOUNDS_Y,
    PASSIVE_EXP_PER_TICK,
    LEVEL_EXP_FACTOR,
    LEVEL_UP_COIN_BONUS,
    TANK_EXP_WATER_THRESHOLD,
    STAT_MIN,
)
from .creature import Creature
from .data_types import DecorationDefinition
from .environment import clamp
from .notifications import Notification, NotificationKind
from .state import AquariumState


_BOUNDS_LOW = np.array([TANK_BOUNDS_X[0], TANK_BOUNDS_Y[0]], dtype=np.float64)
_BOUNDS_HIGH = np.array([TANK_BOUNDS_X[1], TANK_BOUNDS_Y[1]], dtype=np.float64)


@dataclass
class TickResult:
    """Next state plus the notifications raised while computing it"""
    state: AquariumState
    notifications: List[Notification]


def advance(
    state: AquariumState,
    catalog: SpeciesCatalog,
    decorations: Dict[str, DecorationDefinition],
    rng: np.random.Generator,
    now: float
) -> TickResult:
    """
    Compute the next state from the current one.

    Args:
        state: Current authoritative state (not modified)
        catalog: Species stat templates
        decorations: Decoration effect table (environment modifiers)
        rng: Random source for the random walk
        now: Timestamp stamped into last_tick

    Returns:
        TickResult with the new state and death / level-up notifications
    """
    nxt = state.copy()
    notifications: List[Notification] = []

    # PHASE 1: water quality uses the pre-tick living count
    update_water_quality(nxt, decorations)
    water_quality = nxt.environment.water_quality

    # PHASE 2: crowding applies to every living member of the aggressive species
    aggressive_id = catalog.aggressive_species_id
    crowded = nxt.living_of_species(aggressive_id) > 1

    # PHASE 3: per-creature update (dead creatures pass through unchanged)
    for creature in nxt.creatures:
        if not creature.alive:
            continue
        notifications.extend(
            _update_creature(creature, nxt, catalog, decorations, rng, water_quality,
                             crowded and creature.species_id == aggressive_id)
        )

    # PHASE 4: tank experience
    if water_quality > TANK_EXP_WATER_THRESHOLD and nxt.living_count() > 0:
        nxt.economy.tank_exp += 1

    nxt.last_tick = now
    return TickResult(state=nxt, notifications=notifications)


def update_water_quality(state: AquariumState, decorations: Dict[str, DecorationDefinition]):
    """Degrade water quality in place by the pollution load of living creatures"""
    pollution = state.living_count() * POLLUTION_PER_CREATURE
    pollution *= state.environment.pollution_multiplier(decorations)
    state.environment.water_quality = clamp(
        state.environment.water_quality - pollution * POLLUTION_TO_QUALITY
    )


def random_walk(creature: Creature, rng: np.random.Generator):
    """
    Occasionally nudge a creature and update its facing.

    Consumes one draw every call, plus two more when the creature moves.
    """
    if rng.random() >= MOVE_PROBABILITY:
        return

    dx = rng.uniform(-MOVE_RANGE_X, MOVE_RANGE_X)
    dy = rng.uniform(-MOVE_RANGE_Y, MOVE_RANGE_Y)
    creature.position = np.clip(creature.position + np.array([dx, dy]), _BOUNDS_LOW, _BOUNDS_HIGH)

    if dx > 0:
        creature.facing_right = True
    elif dx < 0:
        creature.facing_right = False


def _update_creature(
    creature: Creature,
    state: AquariumState,
    catalog: SpeciesCatalog,
    decorations: Dict[str, DecorationDefinition],
    rng: np.random.Generator,
    water_quality: float,
    crowded: bool
) -> List[Notification]:
    """Apply one tick to a living creature; mutates creature and state.economy"""
    species = catalog.definition_of(creature.species_id)

    # Needs decay (written back only if the creature survives)
    hunger = clamp(creature.hunger - species.hunger_decay_rate)
    mood = clamp(creature.mood - species.mood_decay_rate)

    random_walk(creature, rng)

    # Damage terms are summed before the death check
    damage = 0.0
    if hunger <= STAT_MIN:
        damage += STARVATION_DAMAGE
    if water_quality < POOR_WATER_THRESHOLD:
        damage += species.water_sensitivity * WATER_DAMAGE_FACTOR
    if crowded:
        damage += CROWDING_HEALTH_DAMAGE
        mood -= CROWDING_MOOD_DAMAGE
    health = creature.health - damage

    if health <= 0:
        # Dying creature keeps its pre-tick hunger and mood; only position moved
        creature.die()
        return [Notification(NotificationKind.DEATH, {
            'creature_id': creature.creature_id,
            'name': creature.name,
            'species_id': creature.species_id,
        })]

    creature.hunger = hunger
    creature.mood = clamp(mood)
    creature.health = min(health, species.max_health)

    bonus = state.environment.mood_bonus(creature.species_id, decorations)
    if bonus:
        creature.mood = clamp(creature.mood + bonus)

    creature.exp += PASSIVE_EXP_PER_TICK
    if creature.exp > creature.level * LEVEL_EXP_FACTOR:
        creature.level += 1
        creature.exp = 0
        state.economy.credit(LEVEL_UP_COIN_BONUS)
        return [Notification(NotificationKind.LEVEL_UP, {
            'creature_id': creature.creature_id,
            'name': creature.name,
            'level': creature.level,
        })]

    return []
