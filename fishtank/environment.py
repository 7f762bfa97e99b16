"""
Tank environment: water quality plus installed decorations.

Decoration effects are looked up by id in the decoration table loaded from
decorations.yaml; the environment itself only stores ids.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .constants import INITIAL_WATER_QUALITY, STAT_MIN, STAT_MAX
from .data_types import DecorationDefinition
from .errors import DuplicateDecoration


def clamp(value: float, low: float = STAT_MIN, high: float = STAT_MAX) -> float:
    """Clamp value into [low, high] as a builtin float"""
    return float(min(max(value, low), high))


@dataclass
class Environment:
    """Shared water quality and installed decoration ids (install order kept)"""
    water_quality: float = INITIAL_WATER_QUALITY
    decorations: List[str] = field(default_factory=list)

    def has_decoration(self, decoration_id: str) -> bool:
        return decoration_id in self.decorations

    def install(self, decoration_id: str):
        if decoration_id in self.decorations:
            raise DuplicateDecoration(f"Decoration already installed: {decoration_id}")
        self.decorations.append(decoration_id)

    def pollution_multiplier(self, table: Dict[str, DecorationDefinition]) -> float:
        """Product of installed decorations' pollution multipliers (unknown ids count as 1.0)"""
        multiplier = 1.0
        for decoration_id in self.decorations:
            decoration = table.get(decoration_id)
            if decoration is not None:
                multiplier *= decoration.pollution_multiplier
        return multiplier

    def mood_bonus(self, species_id: str, table: Dict[str, DecorationDefinition]) -> float:
        """Sum of per-tick mood bonuses installed decorations grant a species"""
        bonus = 0.0
        for decoration_id in self.decorations:
            decoration = table.get(decoration_id)
            if decoration is not None:
                bonus += decoration.mood_bonus.get(species_id, 0.0)
        return bonus

    def copy(self) -> 'Environment':
        return Environment(water_quality=self.water_quality, decorations=list(self.decorations))
