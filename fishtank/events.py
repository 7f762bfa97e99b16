"""
Random event generator and resolution.

At most one event is active at a time. While none is active, each tick rolls
EVENT_PROBABILITY to instantiate one from the pool. An event stays active
until the player picks an option; expiry is only enforced when the kernel
opts into sweep_expired().
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .constants import EVENT_PROBABILITY, EVENT_SELECTION_DEFAULT
from .data_types import EventDefinition, EventOption
from .environment import clamp
from .errors import NoActiveEvent, InvalidEventOption
from .notifications import Notification, NotificationKind
from .state import AquariumState


SELECTION_POLICIES = ('first', 'random')


@dataclass(frozen=True)
class GameEvent:
    """Active event instance offered to the player"""
    event_id: str
    title: str
    message: str
    options: List[EventOption]
    expires_at: float

    def to_dict(self) -> dict:
        return {
            'event_id': self.event_id,
            'title': self.title,
            'message': self.message,
            'options': [o.label for o in self.options],
            'expires_at': self.expires_at
        }


def apply_option(state: AquariumState, option: EventOption) -> AquariumState:
    """
    Apply an option's effect to a copy of state.

    Raises:
        InsufficientFunds: option costs more coins than available
    """
    nxt = state.copy()
    if option.coins < 0:
        nxt.economy.debit(-option.coins)
    else:
        nxt.economy.credit(option.coins)
    if option.water_quality:
        nxt.environment.water_quality = clamp(nxt.environment.water_quality + option.water_quality)
    return nxt


class EventGenerator:
    """
    Owns the active event and the draw policy.

    Args:
        pool: Event templates (non-empty)
        probability: Chance per roll while no event is active
        selection: 'first' always offers pool[0]; 'random' draws uniformly
    """

    def __init__(
        self,
        pool: List[EventDefinition],
        probability: float = EVENT_PROBABILITY,
        selection: str = EVENT_SELECTION_DEFAULT
    ):
        if not pool:
            raise ValueError("event pool is empty")
        if selection not in SELECTION_POLICIES:
            raise ValueError(f"unknown selection policy {selection!r}")
        self.pool = list(pool)
        self.probability = probability
        self.selection = selection
        self.active: Optional[GameEvent] = None

    def roll(self, rng: np.random.Generator, now: float) -> Optional[Notification]:
        """Draw for a new event; no draw is consumed while one is active"""
        if self.active is not None:
            return None
        if rng.random() >= self.probability:
            return None

        if self.selection == 'random':
            definition = self.pool[int(rng.integers(0, len(self.pool)))]
        else:
            definition = self.pool[0]

        self.active = GameEvent(
            event_id=definition.event_id,
            title=definition.title,
            message=definition.message,
            options=list(definition.options),
            expires_at=now + definition.lifetime_seconds
        )
        return Notification(NotificationKind.EVENT_TRIGGERED, self.active.to_dict())

    def resolve(self, state: AquariumState, option_index: int) -> Tuple[AquariumState, Notification]:
        """
        Apply the chosen option and clear the active event.

        The event stays active if the option is rejected.

        Raises:
            NoActiveEvent: nothing to resolve
            InvalidEventOption: index out of range
            InsufficientFunds: option cost exceeds coins
        """
        if self.active is None:
            raise NoActiveEvent("No active event")
        if not 0 <= option_index < len(self.active.options):
            raise InvalidEventOption(f"Option {option_index} out of range for {self.active.event_id}")

        option = self.active.options[option_index]
        nxt = apply_option(state, option)
        event = self.active
        self.active = None
        return nxt, Notification(NotificationKind.EVENT_RESOLVED, {
            'event_id': event.event_id,
            'option': option.label,
        })

    def sweep_expired(self, now: float) -> Optional[Notification]:
        """Clear the active event once past expires_at"""
        if self.active is None or now < self.active.expires_at:
            return None
        event = self.active
        self.active = None
        return Notification(NotificationKind.EVENT_EXPIRED, {'event_id': event.event_id})
