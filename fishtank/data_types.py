"""
Data types mirroring YAML schema structures.

These dataclasses are populated by loader.py from YAML files.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional

from .constants import EVENT_LIFETIME_SECONDS


# ============================================================================
# Species Definition
# ============================================================================

@dataclass(frozen=True)
class SpeciesDefinition:
    """Stat template for a species"""
    species_id: str
    display_name: str
    acquisition_cost: int
    max_health: float
    hunger_decay_rate: float  # Hunger lost per tick
    mood_decay_rate: float  # Mood lost per tick
    water_sensitivity: float  # Multiplier on poor-water damage
    aggressive_with_own_species: bool = False
    description: Optional[str] = None


# ============================================================================
# Decorations
# ============================================================================

@dataclass(frozen=True)
class DecorationDefinition:
    """Decoration effect table entry"""
    decoration_id: str
    name: str
    price: int
    pollution_multiplier: float = 1.0  # Applied to the tank's pollution load
    mood_bonus: Dict[str, float] = field(default_factory=dict)  # {species_id: bonus per tick}
    description: Optional[str] = None


# ============================================================================
# Random Events
# ============================================================================

@dataclass(frozen=True)
class EventOption:
    """One choice offered by an event"""
    label: str
    coins: int = 0  # Coin delta (negative = cost)
    water_quality: float = 0.0  # Water quality delta


@dataclass(frozen=True)
class EventDefinition:
    """Template instantiated into a GameEvent when the roll succeeds"""
    event_id: str
    title: str
    message: str
    options: List[EventOption]
    lifetime_seconds: float = EVENT_LIFETIME_SECONDS
