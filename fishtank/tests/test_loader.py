"""
Test data pack loading.

Verifies YAML -> dataclass conversion and schema validation for species,
decorations, quests, and events.
"""

import pytest
from pathlib import Path

from fishtank.loader import (
    DataLoadError,
    load_species, load_species_catalog, load_decorations,
    load_quests, load_events, load_all_data,
)
from fishtank.constants import EVENT_LIFETIME_SECONDS
from fishtank.errors import UnknownSpecies
from fishtank.quests import QuestType
from fishtank.tests.tank_harness import DATA_ROOT, SCHEMA_DIR, make_state


def test_load_species():
    """Test loading Betta species"""
    species = load_species(DATA_ROOT / "species" / "betta.yaml", SCHEMA_DIR)

    print(f"[OK] Loaded species: {species.display_name} ({species.species_id})")

    assert species.species_id == "betta"
    assert species.acquisition_cost == 500
    assert species.max_health == 120.0
    assert species.hunger_decay_rate == 1.5
    assert species.mood_decay_rate == 0.5
    assert species.water_sensitivity == 0.8
    assert species.aggressive_with_own_species is True


def test_load_catalog():
    """Catalog holds all five species with exactly one aggressive"""
    catalog = load_species_catalog(DATA_ROOT / "species", SCHEMA_DIR)

    print(f"[OK] Catalog: {catalog.species_ids()}")

    assert len(catalog) == 5
    assert set(catalog.species_ids()) == {"goldfish", "clownfish", "guppy", "neon-tetra", "betta"}
    assert catalog.aggressive_species_id == "betta"
    assert catalog.definition_of("guppy").hunger_decay_rate == 4.0
    assert catalog.definition_of("neon-tetra").water_sensitivity == 2.0


def test_unknown_species_lookup():
    catalog = load_species_catalog(DATA_ROOT / "species", SCHEMA_DIR)

    with pytest.raises(UnknownSpecies) as excinfo:
        catalog.definition_of("shark")
    assert excinfo.value.species_id == "shark"


def test_check_state_rejects_unregistered_species():
    catalog = load_species_catalog(DATA_ROOT / "species", SCHEMA_DIR)
    state = make_state(catalog, "goldfish")
    catalog.check_state(state)

    state.creatures[0].species_id = "shark"
    with pytest.raises(UnknownSpecies):
        catalog.check_state(state)


def test_load_decorations():
    table = load_decorations(DATA_ROOT / "decorations.yaml", SCHEMA_DIR)

    assert set(table) == {"coral", "volcano", "castle"}
    assert table["volcano"].pollution_multiplier == 1.5
    assert table["coral"].mood_bonus == {"clownfish": 2.0}
    assert table["castle"].pollution_multiplier == 1.0
    assert table["castle"].mood_bonus == {}
    assert table["castle"].price == 2500


def test_load_quests():
    quests = load_quests(DATA_ROOT / "quests.yaml", SCHEMA_DIR)

    assert [q.quest_id for q in quests] == ["q1", "q2"]
    assert quests[0].quest_type is QuestType.POPULATION
    assert quests[0].target == 1 and quests[0].reward == 100
    assert quests[1].quest_type is QuestType.PERFECT_WATER
    assert quests[1].target == 10 and quests[1].reward == 200
    assert not any(q.completed for q in quests)


def test_load_events():
    pool = load_events(DATA_ROOT / "events.yaml", SCHEMA_DIR)

    assert len(pool) == 1
    gift = pool[0]
    assert gift.event_id == "gift"
    assert gift.lifetime_seconds == 5.0
    assert len(gift.options) == 1
    assert gift.options[0].coins == 100


def test_load_all():
    """Test loading entire data pack with schema validation"""
    data = load_all_data(DATA_ROOT, SCHEMA_DIR)

    print(f"\n[OK] Complete data pack loaded:")
    print(f"  Species: {len(data['catalog'])}")
    print(f"  Decorations: {len(data['decorations'])}")
    print(f"  Quests: {len(data['quests'])}")
    print(f"  Events: {len(data['events'])}")

    assert set(data) == {'catalog', 'decorations', 'quests', 'events'}


class TestInvalidData:
    """Broken data packs fail with DataLoadError"""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError, match="File not found"):
            load_species(tmp_path / "nope.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("species_id: [unclosed\n")
        with pytest.raises(DataLoadError, match="YAML parse error"):
            load_species(path)

    def test_schema_violation(self, tmp_path):
        path = tmp_path / "fish.yaml"
        path.write_text(
            "species_id: fish\n"
            "display_name: Fish\n"
            "acquisition_cost: -3\n"
            "max_health: 10\n"
            "rates: {hunger_decay: 1, mood_decay: 1}\n"
            "water_sensitivity: 1\n"
        )
        with pytest.raises(DataLoadError, match="Validation error"):
            load_species(path, SCHEMA_DIR)

    def test_empty_species_dir(self, tmp_path):
        with pytest.raises(DataLoadError, match="No species files"):
            load_species_catalog(tmp_path)

    def test_two_aggressive_species(self, tmp_path):
        for species_id in ("alpha", "beta"):
            (tmp_path / f"{species_id}.yaml").write_text(
                f"species_id: {species_id}\n"
                f"display_name: {species_id.title()}\n"
                "acquisition_cost: 10\n"
                "max_health: 10\n"
                "rates: {hunger_decay: 1, mood_decay: 1}\n"
                "water_sensitivity: 1\n"
                "aggressive_with_own_species: true\n"
            )
        with pytest.raises(DataLoadError, match="exactly one aggressive"):
            load_species_catalog(tmp_path, SCHEMA_DIR)


def test_event_lifetime_defaults_to_constant(tmp_path):
    path = tmp_path / "events.yaml"
    path.write_text(
        "events:\n"
        "  - event_id: bubbles\n"
        "    title: Bubbles\n"
        "    message: The filter gurgles.\n"
        "    options:\n"
        "      - label: Watch\n"
    )
    pool = load_events(path, SCHEMA_DIR)

    assert pool[0].lifetime_seconds == EVENT_LIFETIME_SECONDS
    assert pool[0].options[0].coins == 0
