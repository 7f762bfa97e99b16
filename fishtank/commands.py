"""
Economy / command layer.

Player commands validated then applied to a copy of the state. Each command
either returns the complete next state or raises a CommandRejected subclass
with the input state untouched.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .catalog import SpeciesCatalog
from .constants import (
    FEED_COST,
    FEED_HUNGER_GAIN,
    FEED_MOOD_GAIN,
    FEED_EXP_GAIN,
    CLEAN_WATER_COST,
    PERFECT_WATER,
    CREATURE_NAMES,
)
from .creature import Creature
from .data_types import DecorationDefinition
from .environment import clamp
from .errors import (
    InsufficientFunds,
    SpeciesExclusivityViolation,
    TankFull,
    UnknownDecoration,
    DuplicateDecoration,
    CreatureNotFound,
    CreatureStillAlive,
    ConfirmationRequired,
)
from .notifications import Notification, NotificationKind
from .rng import pick_name
from .state import AquariumState


@dataclass
class CommandResult:
    state: AquariumState
    notifications: List[Notification]


def _require_funds(state: AquariumState, amount: int):
    if not state.economy.can_afford(amount):
        raise InsufficientFunds(amount, state.economy.coins)


def feed(state: AquariumState) -> CommandResult:
    """Feed every living creature. Exp gained here never triggers a level-up."""
    _require_funds(state, FEED_COST)

    nxt = state.copy()
    nxt.economy.debit(FEED_COST)
    fed = 0
    for creature in nxt.creatures:
        if not creature.alive:
            continue
        creature.hunger = clamp(creature.hunger + FEED_HUNGER_GAIN)
        creature.mood = clamp(creature.mood + FEED_MOOD_GAIN)
        creature.exp += FEED_EXP_GAIN
        fed += 1

    return CommandResult(nxt, [Notification(NotificationKind.FEED_APPLIED, {'fed': fed, 'cost': FEED_COST})])


def clean_water(state: AquariumState) -> CommandResult:
    """Reset water quality to 100 (overwrite, not additive)"""
    _require_funds(state, CLEAN_WATER_COST)

    nxt = state.copy()
    nxt.economy.debit(CLEAN_WATER_COST)
    nxt.environment.water_quality = PERFECT_WATER

    return CommandResult(nxt, [Notification(NotificationKind.WATER_CLEANED, {'cost': CLEAN_WATER_COST})])


def acquire_creature(
    state: AquariumState,
    species_id: str,
    catalog: SpeciesCatalog,
    rng: np.random.Generator,
    now: float
) -> CommandResult:
    """
    Buy a creature and add it at the tank center.

    Checks run in order: unknown species, funds, exclusivity of the
    aggressive species, living capacity (6 + tank level).

    Raises:
        UnknownSpecies, InsufficientFunds, SpeciesExclusivityViolation, TankFull
    """
    species = catalog.definition_of(species_id)
    price = species.acquisition_cost

    _require_funds(state, price)

    if species.aggressive_with_own_species and state.living_of_species(species_id) > 0:
        raise SpeciesExclusivityViolation(f"A {species.display_name} already lives in the tank")

    if state.living_count() >= state.capacity():
        raise TankFull(f"Tank holds {state.capacity()} living creatures")

    nxt = state.copy()
    nxt.economy.debit(price)
    creature = Creature.spawn(
        creature_id=nxt.allocate_id(species_id),
        species=species,
        name=pick_name(rng, CREATURE_NAMES),
        now=now
    )
    nxt.creatures.append(creature)

    return CommandResult(nxt, [Notification(NotificationKind.PURCHASE_APPLIED, {
        'item': 'creature',
        'creature_id': creature.creature_id,
        'species_id': species_id,
        'name': creature.name,
        'cost': price,
    })])


def install_decoration(
    state: AquariumState,
    decoration_id: str,
    decorations: Dict[str, DecorationDefinition],
    price: Optional[int] = None
) -> CommandResult:
    """
    Buy and install a decoration.

    Args:
        price: Price to charge; defaults to the decoration table price

    Raises:
        UnknownDecoration, DuplicateDecoration, InsufficientFunds
    """
    if decoration_id not in decorations:
        raise UnknownDecoration(f"Unknown decoration: {decoration_id}")
    if price is None:
        price = decorations[decoration_id].price

    if state.environment.has_decoration(decoration_id):
        raise DuplicateDecoration(f"Decoration already installed: {decoration_id}")
    _require_funds(state, price)

    nxt = state.copy()
    nxt.economy.debit(price)
    nxt.environment.install(decoration_id)

    return CommandResult(nxt, [Notification(NotificationKind.PURCHASE_APPLIED, {
        'item': 'decoration',
        'decoration_id': decoration_id,
        'cost': price,
    })])


def dispose_creature(state: AquariumState, creature_id: str, confirmed: bool) -> CommandResult:
    """
    Remove a dead creature's record.

    Raises:
        ConfirmationRequired, CreatureNotFound, CreatureStillAlive
    """
    if not confirmed:
        raise ConfirmationRequired(f"Disposing {creature_id} needs confirmation")

    creature = state.find(creature_id)
    if creature is None:
        raise CreatureNotFound(f"No creature {creature_id}")
    if creature.alive:
        raise CreatureStillAlive(f"{creature.name} is still alive")

    nxt = state.copy()
    nxt.creatures = [c for c in nxt.creatures if c.creature_id != creature_id]

    return CommandResult(nxt, [Notification(NotificationKind.CREATURE_DISPOSED, {
        'creature_id': creature_id,
        'name': creature.name,
    })])
