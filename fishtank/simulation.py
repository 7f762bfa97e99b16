"""
Fish tank simulation kernel.

Owns the authoritative state, the quest tracker, and the event generator.
tick() and every command run under one lock around "read state, compute next
state, write state", so a scheduler thread and player input can share the
kernel safely.
"""

import threading
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np

from .catalog import SpeciesCatalog
from .commands import (
    CommandResult,
    feed,
    clean_water,
    acquire_creature,
    install_decoration,
    dispose_creature,
)
from .constants import (
    SAVE_KEY,
    TICK_TIME_WINDOW,
    EVENT_PROBABILITY,
    EVENT_EXPIRY_SWEEP,
    EVENT_SELECTION_DEFAULT,
)
from .data_types import DecorationDefinition
from .errors import CommandRejected
from .events import EventGenerator, GameEvent
from .loader import DEFAULT_DATA_ROOT, DEFAULT_SCHEMA_DIR, load_all_data
from .notifications import Notification, NotificationKind
from .persistence import BackgroundSaver, KeyValueStore, encode_save, load_save
from .quests import Quest, QuestTracker
from .rng import make_rng
from .state import AquariumState, default_state
from .tick import advance


Listener = Callable[[Notification], None]


class AquariumSimulation:
    """
    Main simulation class for the fish tank.

    Loads the data pack, restores the save slot (if any), and exposes the
    per-tick update plus the player command surface. Commands return True on
    success and False on a rejection (reason kept in last_error).
    """

    def __init__(
        self,
        data_root: Path = DEFAULT_DATA_ROOT,
        schema_dir: Optional[Path] = DEFAULT_SCHEMA_DIR,
        store: Optional[KeyValueStore] = None,
        seed: Optional[int] = None,
        event_expiry: bool = EVENT_EXPIRY_SWEEP,
        event_selection: str = EVENT_SELECTION_DEFAULT,
        event_probability: float = EVENT_PROBABILITY,
        now_fn: Callable[[], float] = time.time,
        save_key: str = SAVE_KEY
    ):
        """
        Initialize simulation from data pack.

        Args:
            data_root: Path to data directory
            schema_dir: JSON schema directory (None skips validation)
            store: Optional key-value store for the save slot
            seed: RNG seed (None = OS entropy)
            event_expiry: Clear events past expires_at each tick
            event_selection: 'first' or 'random' event pool policy
            event_probability: Chance per tick of a new event
            now_fn: Clock used to stamp ticks and new creatures
            save_key: Store key of the save slot
        """
        print("Loading data pack...")
        data = load_all_data(data_root, schema_dir)

        self.catalog: SpeciesCatalog = data['catalog']
        self.decorations: Dict[str, DecorationDefinition] = data['decorations']
        self.quest_tracker = QuestTracker(data['quests'])
        self.events = EventGenerator(
            data['events'],
            probability=event_probability,
            selection=event_selection
        )

        self.rng: np.random.Generator = make_rng(seed)
        self.now_fn = now_fn
        self.event_expiry = event_expiry
        self.muted = False
        self.tick_count: int = 0
        self.last_error: Optional[CommandRejected] = None
        self.last_notifications: List[Notification] = []

        self._lock = threading.RLock()
        self._listeners: List[Listener] = []

        # Performance metrics
        self._tick_times: List[float] = []
        self._tick_time_sum: float = 0.0
        self._tick_time_window: int = TICK_TIME_WINDOW

        # Restore save slot (corrupted saves fall back to defaults)
        self.store = store
        self.save_key = save_key
        self.saver: Optional[BackgroundSaver] = None
        self.state: AquariumState = default_state(self.now_fn())
        if store is not None:
            saved = load_save(store, save_key, self.catalog)
            if saved is not None:
                saved.state.last_tick = self.now_fn()
                self.state = saved.state
                self.quest_tracker.restore_progress(saved.quests)
                print(f"  Restored save: {len(self.state.creatures)} creatures, "
                      f"{self.state.economy.coins} coins")
            self.saver = BackgroundSaver(store, save_key)

        print(f"[OK] Simulation initialized: {len(self.catalog)} species, "
              f"{len(self.decorations)} decorations, {len(self.quest_tracker.quests)} quests, "
              f"seed={seed}")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener):
        """Register a fire-and-forget notification listener"""
        self._listeners.append(listener)

    def _publish(self, notifications: List[Notification]):
        self.last_notifications = list(notifications)
        for notification in notifications:
            for listener in self._listeners:
                try:
                    listener(notification)
                except Exception as e:
                    print(f"[WARN] Listener failed on {notification.kind.value}: {e}")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> List[Notification]:
        """
        Advance the simulation by one tick.

        Order: tick resolver -> quest evaluation on the same resulting state
        -> event expiry sweep (optional) -> event roll -> persist.

        Returns:
            Notifications raised this tick (also sent to listeners)
        """
        tick_start = time.perf_counter()

        with self._lock:
            now = self.now_fn()

            result = advance(self.state, self.catalog, self.decorations, self.rng, now)
            notifications = list(result.notifications)

            quest_result = self.quest_tracker.evaluate(result.state)
            notifications.extend(quest_result.notifications)

            if self.event_expiry:
                expired = self.events.sweep_expired(now)
                if expired is not None:
                    notifications.append(expired)

            triggered = self.events.roll(self.rng, now)
            if triggered is not None:
                notifications.append(triggered)

            self.state = quest_result.state
            self.tick_count += 1
            self._persist()

        self._record_tick_time(time.perf_counter() - tick_start)
        self._publish(notifications)
        return notifications

    def _persist(self):
        if self.saver is not None:
            self.saver.submit(encode_save(self.state, self.quest_tracker.progress_dict()))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _run_command(self, name: str, command: Callable[[AquariumState], CommandResult]) -> bool:
        with self._lock:
            try:
                result = command(self.state)
            except CommandRejected as e:
                self.last_error = e
                print(f"[WARN] {name} rejected: {e}")
                return False
            self.state = result.state
            self.last_error = None
            self._persist()

        self._publish(result.notifications)
        return True

    def feed(self) -> bool:
        return self._run_command('feed', feed)

    def clean_water(self) -> bool:
        return self._run_command('clean_water', clean_water)

    def acquire_creature(self, species_id: str) -> bool:
        """Buy a creature; an unregistered species_id raises UnknownSpecies"""
        return self._run_command(
            'acquire_creature',
            lambda s: acquire_creature(s, species_id, self.catalog, self.rng, self.now_fn())
        )

    def install_decoration(self, decoration_id: str, price: Optional[int] = None) -> bool:
        return self._run_command(
            'install_decoration',
            lambda s: install_decoration(s, decoration_id, self.decorations, price)
        )

    def dispose_creature(self, creature_id: str, confirmed: bool = False) -> bool:
        return self._run_command(
            'dispose_creature',
            lambda s: dispose_creature(s, creature_id, confirmed)
        )

    def resolve_event(self, option_index: int) -> bool:
        def _resolve(state: AquariumState) -> CommandResult:
            nxt, notification = self.events.resolve(state, option_index)
            return CommandResult(nxt, [notification])

        return self._run_command('resolve_event', _resolve)

    def toggle_audio(self) -> bool:
        with self._lock:
            self.muted = not self.muted
            notification = Notification(NotificationKind.AUDIO_TOGGLED, {'muted': self.muted})
        self._publish([notification])
        return True

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def active_event(self) -> Optional[GameEvent]:
        return self.events.active

    @property
    def quests(self) -> List[Quest]:
        return list(self.quest_tracker.quests)

    def close(self):
        """Flush pending saves and stop the writer thread"""
        if self.saver is not None:
            self.saver.close()

    def get_tick_stats(self) -> dict:
        """
        Get tick timing statistics.

        Returns:
            Dict with tick_count, avg_tick_time_ms, last_tick_time_ms
        """
        if not self._tick_times:
            return {
                'tick_count': self.tick_count,
                'avg_tick_time_ms': 0.0,
                'last_tick_time_ms': 0.0
            }

        return {
            'tick_count': self.tick_count,
            'avg_tick_time_ms': (self._tick_time_sum / len(self._tick_times)) * 1000,
            'last_tick_time_ms': self._tick_times[-1] * 1000
        }

    def _record_tick_time(self, elapsed: float):
        """Record tick time in rolling window"""
        self._tick_times.append(elapsed)
        self._tick_time_sum += elapsed

        if len(self._tick_times) > self._tick_time_window:
            self._tick_time_sum -= self._tick_times.pop(0)

    def get_snapshot(self) -> dict:
        """
        Get complete simulation state snapshot.

        Returns:
            Dict with tick_count, state, quests, active event, timing
        """
        with self._lock:
            event = self.events.active
            return {
                'tick_count': self.tick_count,
                'creature_count': len(self.state.creatures),
                'living_count': self.state.living_count(),
                'state': self.state.to_dict(),
                'quests': self.quest_tracker.progress_dict(),
                'active_event': event.to_dict() if event is not None else None,
                'muted': self.muted,
                'timing': self.get_tick_stats()
            }

    def print_tick_summary(self):
        """Print one-line tick summary"""
        stats = self.get_tick_stats()
        state = self.state
        print(f"Tick {stats['tick_count']:5d} | "
              f"Avg: {stats['avg_tick_time_ms']:6.3f} ms | "
              f"Fish: {state.living_count()}/{len(state.creatures)} | "
              f"Water: {state.environment.water_quality:5.1f} | "
              f"Coins: {state.economy.coins:5d} | "
              f"TankExp: {state.economy.tank_exp}")
