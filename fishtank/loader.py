"""
YAML data loader with schema validation.

Loads species, decorations, quests, and random event definitions from YAML
files and validates against JSON schemas.
"""

import yaml
import json
from pathlib import Path
from typing import Dict, List, Optional
import jsonschema

from .constants import EVENT_LIFETIME_SECONDS
from .data_types import SpeciesDefinition, DecorationDefinition, EventDefinition, EventOption
from .catalog import SpeciesCatalog
from .quests import Quest, QuestType


DEFAULT_DATA_ROOT = Path(__file__).parent / "data"
DEFAULT_SCHEMA_DIR = DEFAULT_DATA_ROOT / "schemas"


class DataLoadError(Exception):
    """Raised when data loading or validation fails"""
    pass


def load_yaml(file_path: Path) -> dict:
    """Load YAML file and return parsed dict"""
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise DataLoadError(f"YAML parse error in {file_path}: {e}")


def validate_against_schema(data: dict, schema_path: Path, data_path: Path):
    """Validate data dict against JSON schema"""
    if not schema_path.exists():
        # Schema validation optional
        return

    try:
        with open(schema_path, 'r', encoding='utf-8') as f:
            schema = json.load(f)
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        raise DataLoadError(f"Validation error in {data_path}: {e.message}")
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON schema {schema_path}: {e}")


def load_species(file_path: Path, schema_dir: Optional[Path] = None) -> SpeciesDefinition:
    """Load species definition from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "species.schema.json", file_path)

    rates = data['rates']

    return SpeciesDefinition(
        species_id=data['species_id'],
        display_name=data['display_name'],
        acquisition_cost=int(data['acquisition_cost']),
        max_health=float(data['max_health']),
        hunger_decay_rate=float(rates['hunger_decay']),
        mood_decay_rate=float(rates['mood_decay']),
        water_sensitivity=float(data['water_sensitivity']),
        aggressive_with_own_species=bool(data.get('aggressive_with_own_species', False)),
        description=data.get('description')
    )


def load_species_catalog(species_dir: Path, schema_dir: Optional[Path] = None) -> SpeciesCatalog:
    """Load all species from directory into a catalog"""
    species_dir = Path(species_dir)
    if not species_dir.exists():
        raise DataLoadError(f"Species directory not found: {species_dir}")

    definitions = []
    for yaml_file in sorted(species_dir.glob("*.yaml")):
        definitions.append(load_species(yaml_file, schema_dir))

    if not definitions:
        raise DataLoadError(f"No species files found in {species_dir}")

    try:
        return SpeciesCatalog(definitions)
    except ValueError as e:
        raise DataLoadError(f"Inconsistent species catalog in {species_dir}: {e}")


def load_decorations(file_path: Path, schema_dir: Optional[Path] = None) -> Dict[str, DecorationDefinition]:
    """Load decoration effect table from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "decorations.schema.json", file_path)

    table = {}
    for d in data['decorations']:
        decoration = DecorationDefinition(
            decoration_id=d['decoration_id'],
            name=d['name'],
            price=int(d['price']),
            pollution_multiplier=float(d.get('pollution_multiplier', 1.0)),
            mood_bonus={k: float(v) for k, v in d.get('mood_bonus', {}).items()},
            description=d.get('description')
        )
        table[decoration.decoration_id] = decoration

    return table


def load_quests(file_path: Path, schema_dir: Optional[Path] = None) -> List[Quest]:
    """Load initial quest list from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "quests.schema.json", file_path)

    return [
        Quest(
            quest_id=q['quest_id'],
            description=q['description'],
            quest_type=QuestType(q['quest_type']),
            target=int(q['target']),
            reward=int(q['reward'])
        )
        for q in data['quests']
    ]


def load_events(file_path: Path, schema_dir: Optional[Path] = None) -> List[EventDefinition]:
    """Load random event pool from YAML"""
    data = load_yaml(file_path)

    if schema_dir:
        validate_against_schema(data, schema_dir / "events.schema.json", file_path)

    pool = []
    for e in data['events']:
        options = [EventOption(**o) for o in e['options']]
        pool.append(EventDefinition(
            event_id=e['event_id'],
            title=e['title'],
            message=e['message'],
            options=options,
            lifetime_seconds=float(e.get('lifetime_seconds', EVENT_LIFETIME_SECONDS))
        ))

    return pool


def load_all_data(data_root: Path = DEFAULT_DATA_ROOT, schema_dir: Optional[Path] = None) -> dict:
    """Load all simulation data from data directory

    Returns dict with keys: catalog, decorations, quests, events
    """
    data_root = Path(data_root)

    return {
        'catalog': load_species_catalog(data_root / "species", schema_dir),
        'decorations': load_decorations(data_root / "decorations.yaml", schema_dir),
        'quests': load_quests(data_root / "quests.yaml", schema_dir),
        'events': load_events(data_root / "events.yaml", schema_dir)
    }
