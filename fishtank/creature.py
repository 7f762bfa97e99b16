"""
Creature runtime representation.

Creatures are created from species definitions and live in the tank until
disposed. Each creature has a unique creature_id, vitals, progression, and a
2D position used by the random walk.
"""

import numpy as np
from dataclasses import dataclass

from .constants import SPAWN_HUNGER, SPAWN_MOOD, SPAWN_POSITION
from .data_types import SpeciesDefinition


@dataclass
class Creature:
    """
    Runtime creature in the tank.

    Attributes:
        creature_id: Unique identifier (format: "{species_id}-{serial:04d}"), never reused
        species_id: Species definition ID (e.g., "goldfish")
        name: Display name from the name pool (not unique)
        born_time: Creation timestamp (seconds since epoch)
        hunger: 0 = starving, 100 = full
        mood: 0-100
        health: 0 to species max_health
        alive: Flips true -> false once, never back
        level: Starts at 1
        exp: Experience toward next level, reset on level-up
        position: [x, y] in percent of tank size
        facing_right: Horizontal facing of the sprite
    """
    creature_id: str
    species_id: str
    name: str
    born_time: float
    hunger: float = SPAWN_HUNGER
    mood: float = SPAWN_MOOD
    health: float = 100.0
    alive: bool = True
    level: int = 1
    exp: int = 0
    position: np.ndarray = None  # [x, y] float64
    facing_right: bool = False

    def __post_init__(self):
        """Ensure position is a float64 array"""
        if self.position is None:
            self.position = np.array(SPAWN_POSITION, dtype=np.float64)
        elif not isinstance(self.position, np.ndarray):
            self.position = np.array(self.position, dtype=np.float64)
        else:
            self.position = self.position.astype(np.float64, copy=False)

    @classmethod
    def spawn(cls, creature_id: str, species: SpeciesDefinition, name: str, now: float) -> 'Creature':
        """Create a fresh creature with species defaults at the tank center"""
        return cls(
            creature_id=creature_id,
            species_id=species.species_id,
            name=name,
            born_time=now,
            health=species.max_health
        )

    def die(self):
        """Pin health to 0 and mark dead"""
        self.health = 0.0
        self.alive = False

    def copy(self) -> 'Creature':
        return Creature(
            creature_id=self.creature_id,
            species_id=self.species_id,
            name=self.name,
            born_time=self.born_time,
            hunger=self.hunger,
            mood=self.mood,
            health=self.health,
            alive=self.alive,
            level=self.level,
            exp=self.exp,
            position=self.position.copy(),
            facing_right=self.facing_right
        )

    def to_dict(self) -> dict:
        """
        Serialize creature to JSON-compatible dict.

        Returns:
            Dict with all creature fields
        """
        return {
            'creature_id': self.creature_id,
            'species_id': self.species_id,
            'name': self.name,
            'born_time': self.born_time,
            'hunger': self.hunger,
            'mood': self.mood,
            'health': self.health,
            'alive': self.alive,
            'level': self.level,
            'exp': self.exp,
            'position': self.position.tolist(),
            'facing_right': self.facing_right
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Creature':
        """
        Deserialize creature from dict.

        Args:
            data: Dict with creature fields

        Returns:
            Creature instance
        """
        return cls(
            creature_id=data['creature_id'],
            species_id=data['species_id'],
            name=data['name'],
            born_time=float(data.get('born_time', 0.0)),
            hunger=float(data.get('hunger', SPAWN_HUNGER)),
            mood=float(data.get('mood', SPAWN_MOOD)),
            health=float(data.get('health', 100.0)),
            alive=bool(data.get('alive', True)),
            level=int(data.get('level', 1)),
            exp=int(data.get('exp', 0)),
            position=np.array(data.get('position', SPAWN_POSITION), dtype=np.float64),
            facing_right=bool(data.get('facing_right', False))
        )
