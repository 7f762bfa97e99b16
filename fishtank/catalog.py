"""
Species catalog.

Read-only lookup of species stat templates, built once by the loader.
"""

from typing import Dict, Iterable, List

from .data_types import SpeciesDefinition
from .errors import UnknownSpecies


class SpeciesCatalog:
    """
    Immutable species_id -> SpeciesDefinition table.

    Construction enforces the catalog invariants: unique ids and exactly one
    species flagged aggressive_with_own_species.
    """

    def __init__(self, definitions: Iterable[SpeciesDefinition]):
        self._definitions: Dict[str, SpeciesDefinition] = {}
        for definition in definitions:
            if definition.species_id in self._definitions:
                raise ValueError(f"duplicate species id {definition.species_id!r}")
            self._definitions[definition.species_id] = definition

        aggressive = [d.species_id for d in self._definitions.values() if d.aggressive_with_own_species]
        if len(aggressive) != 1:
            raise ValueError(f"expected exactly one aggressive species, found {aggressive}")
        self._aggressive_id = aggressive[0]

    def definition_of(self, species_id: str) -> SpeciesDefinition:
        try:
            return self._definitions[species_id]
        except KeyError:
            raise UnknownSpecies(species_id) from None

    @property
    def aggressive_species_id(self) -> str:
        return self._aggressive_id

    def species_ids(self) -> List[str]:
        return list(self._definitions)

    def check_state(self, state):
        """Startup consistency check: every creature references a known species."""
        for creature in state.creatures:
            self.definition_of(creature.species_id)

    def __contains__(self, species_id: str) -> bool:
        return species_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions.values())
