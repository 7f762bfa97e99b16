"""
Notification surface toward the presentation/audio layer.

The core never calls UI or audio code directly; ticks and commands return a
list of Notification records and the kernel forwards them to subscribers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class NotificationKind(Enum):
    DEATH = "death"
    LEVEL_UP = "level_up"
    FEED_APPLIED = "feed_applied"
    WATER_CLEANED = "water_cleaned"
    PURCHASE_APPLIED = "purchase_applied"
    CREATURE_DISPOSED = "creature_disposed"
    QUEST_COMPLETED = "quest_completed"
    EVENT_TRIGGERED = "event_triggered"
    EVENT_RESOLVED = "event_resolved"
    EVENT_EXPIRED = "event_expired"
    AUDIO_TOGGLED = "audio_toggled"


@dataclass(frozen=True)
class Notification:
    """Fire-and-forget signal with a small payload (ids, names, amounts)"""
    kind: NotificationKind
    payload: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {'kind': self.kind.value, 'payload': dict(self.payload)}
