"""
Authoritative aquarium state container.

Holds the creature population, the economy, and the environment. Ticks and
commands never mutate a state in place: they work on copy() and return the
result, so a rejected command or a failed tick leaves no partial update.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .constants import (
    BASE_TANK_CAPACITY,
    INITIAL_COINS,
    INITIAL_TANK_LEVEL,
    INITIAL_WATER_QUALITY,
)
from .creature import Creature
from .environment import Environment, clamp
from .errors import InsufficientFunds


@dataclass
class Economy:
    """Coins and tank progression counters"""
    coins: int = INITIAL_COINS
    tank_level: int = INITIAL_TANK_LEVEL
    tank_exp: int = 0

    def can_afford(self, amount: int) -> bool:
        return self.coins >= amount

    def debit(self, amount: int):
        """Remove coins; raises InsufficientFunds rather than going negative"""
        if self.coins < amount:
            raise InsufficientFunds(amount, self.coins)
        self.coins -= amount

    def credit(self, amount: int):
        self.coins += amount

    def copy(self) -> 'Economy':
        return Economy(coins=self.coins, tank_level=self.tank_level, tank_exp=self.tank_exp)


@dataclass
class AquariumState:
    """
    Complete simulation state.

    Attributes:
        creatures: Population in acquisition order (dead-but-undisposed included)
        economy: Coins and tank progression
        environment: Water quality and decorations
        last_tick: Timestamp stamped by the last tick
        next_serial: Serial for the next creature id (ids are never reused)
    """
    creatures: List[Creature] = field(default_factory=list)
    economy: Economy = field(default_factory=Economy)
    environment: Environment = field(default_factory=Environment)
    last_tick: float = 0.0
    next_serial: int = 1

    # ------------------------------------------------------------------
    # Derived observables
    # ------------------------------------------------------------------

    def living(self) -> List[Creature]:
        return [c for c in self.creatures if c.alive]

    def living_count(self) -> int:
        return sum(1 for c in self.creatures if c.alive)

    def living_of_species(self, species_id: str) -> int:
        return sum(1 for c in self.creatures if c.alive and c.species_id == species_id)

    def find(self, creature_id: str) -> Optional[Creature]:
        for creature in self.creatures:
            if creature.creature_id == creature_id:
                return creature
        return None

    def capacity(self) -> int:
        return BASE_TANK_CAPACITY + self.economy.tank_level

    def allocate_id(self, species_id: str) -> str:
        creature_id = f"{species_id}-{self.next_serial:04d}"
        self.next_serial += 1
        return creature_id

    # ------------------------------------------------------------------
    # Copy & serialization
    # ------------------------------------------------------------------

    def copy(self) -> 'AquariumState':
        return AquariumState(
            creatures=[c.copy() for c in self.creatures],
            economy=self.economy.copy(),
            environment=self.environment.copy(),
            last_tick=self.last_tick,
            next_serial=self.next_serial
        )

    def to_dict(self) -> dict:
        """
        Serialize state to the flat JSON-compatible save layout.

        Returns:
            Dict with creatures, coins, tank_level, tank_exp, water_quality,
            decorations, last_tick, next_serial
        """
        return {
            'creatures': [c.to_dict() for c in self.creatures],
            'coins': self.economy.coins,
            'tank_level': self.economy.tank_level,
            'tank_exp': self.economy.tank_exp,
            'water_quality': self.environment.water_quality,
            'decorations': list(self.environment.decorations),
            'last_tick': self.last_tick,
            'next_serial': self.next_serial
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'AquariumState':
        """
        Deserialize state, merging stored fields over defaults.

        Args:
            data: Dict in the to_dict() layout (missing keys take defaults)

        Returns:
            AquariumState instance
        """
        merged = {**default_state().to_dict(), **data}

        creatures = [Creature.from_dict(c) for c in merged['creatures']]

        # Never hand out an id already in use, even if next_serial was lost
        next_serial = max(int(merged['next_serial']), _highest_serial(creatures) + 1)

        decorations = []
        for decoration_id in map(str, merged['decorations']):
            if decoration_id not in decorations:
                decorations.append(decoration_id)

        return cls(
            creatures=creatures,
            economy=Economy(
                coins=max(int(merged['coins']), 0),
                tank_level=int(merged['tank_level']),
                tank_exp=int(merged['tank_exp'])
            ),
            environment=Environment(
                water_quality=clamp(float(merged['water_quality'])),
                decorations=decorations
            ),
            last_tick=float(merged['last_tick']),
            next_serial=next_serial
        )


def _highest_serial(creatures: List[Creature]) -> int:
    highest = 0
    for creature in creatures:
        suffix = creature.creature_id.rsplit('-', 1)[-1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))
    return highest


def default_state(now: float = 0.0) -> AquariumState:
    """Fresh tank: no creatures, starting coins, clean water"""
    return AquariumState(
        economy=Economy(coins=INITIAL_COINS, tank_level=INITIAL_TANK_LEVEL, tank_exp=0),
        environment=Environment(water_quality=INITIAL_WATER_QUALITY),
        last_tick=now
    )
