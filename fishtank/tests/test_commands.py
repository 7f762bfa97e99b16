"""
Test the economy / command layer.

Every rejected command must leave the input state untouched; accepted
commands return a new state and debit exactly the listed price.
"""

import pytest

from fishtank.commands import (
    feed, clean_water, acquire_creature, install_decoration, dispose_creature,
)
from fishtank.constants import CREATURE_NAMES
from fishtank.errors import (
    InsufficientFunds, SpeciesExclusivityViolation, TankFull, UnknownSpecies,
    UnknownDecoration, DuplicateDecoration, CreatureNotFound, CreatureStillAlive,
    ConfirmationRequired,
)
from fishtank.notifications import NotificationKind
from fishtank.rng import make_rng
from fishtank.tests.tank_harness import build_catalog, build_decorations, make_state


CATALOG = build_catalog()
DECORATIONS = build_decorations()


def buy(state, species_id, seed=1):
    return acquire_creature(state, species_id, CATALOG, make_rng(seed), now=42.0)


class TestFeed:

    def test_feed_five_times(self):
        """coins=500, five feeds: -25 coins, +30 hunger per call clamped at 100"""
        state = make_state(CATALOG, "goldfish", "guppy", hunger=20.0)
        expected = [50.0, 80.0, 100.0, 100.0, 100.0]

        for i in range(5):
            result = feed(state)
            state = result.state
            print(f"  feed {i + 1}: coins={state.economy.coins} "
                  f"hunger={[c.hunger for c in state.creatures]}")
            assert all(c.hunger == expected[i] for c in state.creatures)
            assert result.notifications[0].kind is NotificationKind.FEED_APPLIED

        assert state.economy.coins == 475

    def test_feed_mood_and_exp_without_level_up(self):
        state = make_state(CATALOG, "goldfish", mood=95.0, exp=99)
        fish = feed(state).state.creatures[0]

        assert fish.mood == 100.0
        assert fish.exp == 104
        assert fish.level == 1

    def test_feed_skips_dead(self):
        state = make_state(CATALOG, "goldfish", "goldfish", hunger=10.0)
        state.creatures[1].die()
        nxt = feed(state).state

        assert nxt.creatures[0].hunger == 40.0
        assert nxt.creatures[1].hunger == 10.0
        assert nxt.creatures[1].exp == 0

    def test_feed_insufficient_funds(self):
        state = make_state(CATALOG, "goldfish", coins=4)
        before = state.to_dict()

        with pytest.raises(InsufficientFunds):
            feed(state)
        assert state.to_dict() == before


class TestCleanWater:

    def test_clean_sets_exactly_100(self):
        state = make_state(CATALOG, "goldfish", coins=20, water_quality=12.5)
        result = clean_water(state)

        assert result.state.environment.water_quality == 100.0
        assert result.state.economy.coins == 0
        assert result.notifications[0].kind is NotificationKind.WATER_CLEANED
        assert state.environment.water_quality == 12.5

    def test_clean_insufficient_funds(self):
        state = make_state(CATALOG, coins=19, water_quality=30.0)

        with pytest.raises(InsufficientFunds):
            clean_water(state)
        assert state.environment.water_quality == 30.0
        assert state.economy.coins == 19


class TestAcquireCreature:

    def test_spawn_defaults(self):
        state = make_state(CATALOG)
        result = buy(state, "clownfish")
        fish = result.state.creatures[0]

        assert result.state.economy.coins == 250
        assert fish.creature_id == "clownfish-0001"
        assert fish.species_id == "clownfish"
        assert fish.name in CREATURE_NAMES
        assert fish.hunger == 80.0 and fish.mood == 80.0
        assert fish.health == 80.0
        assert fish.level == 1 and fish.exp == 0
        assert fish.alive
        assert fish.position.tolist() == [50.0, 50.0]
        assert fish.born_time == 42.0
        assert result.notifications[0].kind is NotificationKind.PURCHASE_APPLIED

    def test_insufficient_funds(self):
        state = make_state(CATALOG, coins=99)

        with pytest.raises(InsufficientFunds):
            buy(state, "goldfish")
        assert state.creatures == []

    def test_unknown_species(self):
        with pytest.raises(UnknownSpecies):
            buy(make_state(CATALOG), "shark")

    def test_second_aggressive_rejected(self):
        state = make_state(CATALOG, "betta", coins=1000)
        before = state.to_dict()

        with pytest.raises(SpeciesExclusivityViolation):
            buy(state, "betta")
        assert state.to_dict() == before

    def test_aggressive_allowed_after_death(self):
        state = make_state(CATALOG, "betta", coins=1000)
        state.creatures[0].die()
        nxt = buy(state, "betta").state

        assert nxt.living_of_species("betta") == 1
        assert nxt.economy.coins == 500

    def test_tank_full_at_capacity(self):
        # Capacity = 6 + tank level 1
        state = make_state(CATALOG, *["guppy"] * 7, coins=1000)
        assert state.capacity() == 7

        with pytest.raises(TankFull):
            buy(state, "guppy")
        assert len(state.creatures) == 7
        assert state.economy.coins == 1000

    def test_capacity_minus_one_succeeds(self):
        state = make_state(CATALOG, *["guppy"] * 6, coins=1000)
        nxt = buy(state, "goldfish").state

        assert len(nxt.creatures) == 7
        assert nxt.economy.coins == 900

    def test_capacity_counts_living_only(self):
        state = make_state(CATALOG, *["guppy"] * 7, coins=1000)
        state.creatures[0].die()
        nxt = buy(state, "guppy").state

        assert len(nxt.creatures) == 8

    def test_tank_level_raises_capacity(self):
        state = make_state(CATALOG, *["guppy"] * 7, coins=1000, tank_level=2)
        nxt = buy(state, "guppy").state

        assert nxt.living_count() == 8

    def test_ids_never_reused(self):
        state = make_state(CATALOG, coins=1000)
        state = buy(state, "guppy").state
        first_id = state.creatures[0].creature_id
        state.creatures[0].die()
        state = dispose_creature(state, first_id, confirmed=True).state
        state = buy(state, "guppy").state

        assert state.creatures[0].creature_id != first_id
        assert state.creatures[0].creature_id == "guppy-0002"


class TestInstallDecoration:

    def test_install_at_table_price(self):
        state = make_state(CATALOG, coins=500)
        result = install_decoration(state, "coral", DECORATIONS)

        assert result.state.environment.decorations == ["coral"]
        assert result.state.economy.coins == 0

    def test_explicit_price(self):
        state = make_state(CATALOG, coins=500)
        nxt = install_decoration(state, "castle", DECORATIONS, price=100).state

        assert nxt.environment.has_decoration("castle")
        assert nxt.economy.coins == 400

    def test_duplicate_rejected(self):
        state = make_state(CATALOG, coins=5000, decorations=["volcano"])

        with pytest.raises(DuplicateDecoration):
            install_decoration(state, "volcano", DECORATIONS)
        assert state.economy.coins == 5000
        assert state.environment.decorations == ["volcano"]

    def test_insufficient_funds_is_noop(self):
        state = make_state(CATALOG, coins=1199)

        with pytest.raises(InsufficientFunds):
            install_decoration(state, "volcano", DECORATIONS)
        assert state.environment.decorations == []

    def test_unknown_decoration(self):
        with pytest.raises(UnknownDecoration):
            install_decoration(make_state(CATALOG, coins=5000), "moat", DECORATIONS)


class TestDisposeCreature:

    def test_dispose_dead(self):
        state = make_state(CATALOG, "goldfish", "guppy")
        state.creatures[0].die()
        result = dispose_creature(state, "goldfish-0001", confirmed=True)

        assert [c.creature_id for c in result.state.creatures] == ["guppy-0002"]
        assert result.notifications[0].kind is NotificationKind.CREATURE_DISPOSED
        assert len(state.creatures) == 2

    def test_requires_confirmation(self):
        state = make_state(CATALOG, "goldfish")
        state.creatures[0].die()

        with pytest.raises(ConfirmationRequired):
            dispose_creature(state, "goldfish-0001", confirmed=False)

    def test_alive_rejected(self):
        with pytest.raises(CreatureStillAlive):
            dispose_creature(make_state(CATALOG, "goldfish"), "goldfish-0001", confirmed=True)

    def test_missing_rejected(self):
        with pytest.raises(CreatureNotFound):
            dispose_creature(make_state(CATALOG), "goldfish-0009", confirmed=True)
