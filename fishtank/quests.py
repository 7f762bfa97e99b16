"""
Quest tracker.

Quests read derived observables of the tank state (population size, water
quality) and never touch creature internals. evaluate() runs once per tick,
after the tick resolver, on that tick's resulting state.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, List

from .constants import PERFECT_WATER
from .notifications import Notification, NotificationKind
from .state import AquariumState


class QuestType(Enum):
    POPULATION = "population"  # current = tracked creature records (dead included)
    PERFECT_WATER = "perfect_water"  # current += 1 per tick at water quality 100
    LEVEL_UP = "level_up"  # Inert: no progress rule
    RELEASE_FISH = "release_fish"  # Inert: no progress rule


@dataclass(frozen=True)
class Quest:
    quest_id: str
    description: str
    quest_type: QuestType
    target: int
    reward: int
    current: int = 0
    completed: bool = False


@dataclass
class QuestEvaluation:
    quests: List[Quest]
    state: AquariumState
    notifications: List[Notification]


def project_progress(quest: Quest, state: AquariumState) -> int:
    """New progress value for an incomplete quest given the current state"""
    if quest.quest_type is QuestType.POPULATION:
        return len(state.creatures)
    if quest.quest_type is QuestType.PERFECT_WATER:
        if state.environment.water_quality >= PERFECT_WATER:
            return quest.current + 1
        return quest.current
    return quest.current


def evaluate(quests: List[Quest], state: AquariumState) -> QuestEvaluation:
    """
    Advance quest progress and pay out newly completed quests.

    Args:
        quests: Current quest list (not modified)
        state: Tank state after this tick's resolve (not modified)

    Returns:
        QuestEvaluation with updated quests, the state with rewards credited,
        and one quest_completed notification per newly completed quest
    """
    updated: List[Quest] = []
    notifications: List[Notification] = []
    nxt = state

    for quest in quests:
        if quest.completed:
            updated.append(quest)
            continue

        current = project_progress(quest, state)
        if current >= quest.target:
            if nxt is state:
                nxt = state.copy()
            nxt.economy.credit(quest.reward)
            updated.append(replace(quest, current=current, completed=True))
            notifications.append(Notification(NotificationKind.QUEST_COMPLETED, {
                'quest_id': quest.quest_id,
                'reward': quest.reward,
            }))
        else:
            updated.append(replace(quest, current=current))

    return QuestEvaluation(quests=updated, state=nxt, notifications=notifications)


class QuestTracker:
    """Owns the quest list between ticks"""

    def __init__(self, quests: List[Quest]):
        self.quests: List[Quest] = list(quests)

    def evaluate(self, state: AquariumState) -> QuestEvaluation:
        result = evaluate(self.quests, state)
        self.quests = result.quests
        return result

    def get(self, quest_id: str) -> Quest:
        for quest in self.quests:
            if quest.quest_id == quest_id:
                return quest
        raise KeyError(quest_id)

    def progress_dict(self) -> Dict[str, dict]:
        """Per-quest progress for the save payload"""
        return {q.quest_id: {'current': q.current, 'completed': q.completed} for q in self.quests}

    def restore_progress(self, progress: Dict[str, dict]):
        """Apply saved progress; unknown quest ids are ignored"""
        restored = []
        for quest in self.quests:
            saved = progress.get(quest.quest_id)
            if saved is None:
                restored.append(quest)
            else:
                restored.append(replace(
                    quest,
                    current=int(saved.get('current', quest.current)),
                    completed=bool(saved.get('completed', quest.completed))
                ))
        self.quests = restored
