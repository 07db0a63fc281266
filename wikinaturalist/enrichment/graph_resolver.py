"""
Group resolver using the Wikidata graph.

Walks parent-taxon, common-name and instance/subclass edges breadth-first
from a species' Wikidata item until it reaches a node that identifies one
of the registry groups.
"""
import logging
from collections import deque
from typing import Protocol

from ..core.group_registry import GroupRegistry, UNKNOWN_GROUP, get_registry
from ..scrapers.wikidata_client import GraphEntity

logger = logging.getLogger(__name__)


# Items whose taxonomy is incomplete on Wikidata: when the traversal reaches
# a key, the value is queued as well. Keys are domesticated forms lacking a
# parent-taxon edge, values the family they belong to.
DOMESTIC_ANIMAL_OVERRIDES: dict[str, str] = {
    "Q144": "Q25324",  # Canis lupus familiaris -> Canidae
    "Q146": "Q25265",  # Felis catus -> Felidae
}

# Groups reported under a broader group once matched. Groups not listed
# are reported as themselves.
GROUP_OUTPUT_MAP: dict[str, str] = {
    "grass": "plant",
    "tree": "plant",
}


class ClaimsFetcher(Protocol):
    def fetch_claims(self, identifier: str) -> GraphEntity: ...


class EntityLookup(Protocol):
    def lookup_entity_id(self, name: str, language: str = "en") -> str | None: ...


class ResolutionState:
    """
    Visited set and FIFO queue of one resolution. Never shared.

    The queue holds one BFS level at a time so that matches found at the
    same depth can be ranked by registry order.
    """

    def __init__(self, seed: str):
        self.visited: set[str] = set()
        self.queue: deque[str] = deque([seed])

    def enqueue(self, identifier: str | None) -> None:
        if identifier and identifier not in self.visited:
            self.queue.append(identifier)

    def pop_level(self) -> list[str]:
        """Drain the queue; return its unvisited identifiers, now marked visited."""
        level = []
        while self.queue:
            identifier = self.queue.popleft()
            if identifier in self.visited:
                continue
            self.visited.add(identifier)
            level.append(identifier)
        return level


class GraphResolver:
    """
    Resolves organism names to registry groups through Wikidata.

    Strategy:
    1. Look up the name's Wikidata item through Wikipedia page props
    2. Breadth-first search from that item; every node expands, in order,
       its parent taxon, related common-name taxa, override target and
       instance-of/subclass-of concepts
    3. The first depth holding a group's item decides the group; if it
       holds several, registry order picks one
    """

    def __init__(
        self,
        wikidata: ClaimsFetcher,
        wikipedia: EntityLookup,
        registry: GroupRegistry | None = None,
        overrides: dict[str, str] | None = None,
        output_map: dict[str, str] | None = None
    ):
        """
        Initialize the resolver.

        Args:
            wikidata: Source of relationship edges
            wikipedia: Name to QID lookup
            registry: Group registry (process default if None)
            overrides: QID substitutions (DOMESTIC_ANIMAL_OVERRIDES if None)
            output_map: Group consolidation (GROUP_OUTPUT_MAP if None)
        """
        self.wikidata = wikidata
        self.wikipedia = wikipedia
        self.registry = registry or get_registry()
        self.overrides = DOMESTIC_ANIMAL_OVERRIDES if overrides is None else overrides
        self.output_map = GROUP_OUTPUT_MAP if output_map is None else output_map

    def resolve_group(self, name: str, language: str = "en") -> str:
        """
        Resolve a scientific name to a group id.

        Args:
            name: Scientific name (e.g., "Pica pica")
            language: Wikipedia edition used for the QID lookup

        Returns:
            Group id; "unknown" if nothing matched or anything failed.
        """
        logger.debug(f"Assessing group for: {name}")

        try:
            seed = self.wikipedia.lookup_entity_id(name, language)
            if not seed:
                logger.info(f"Could not find Wikidata item for {name}")
                return UNKNOWN_GROUP

            group_id = self.resolve_from_identifier(seed)

        except Exception as e:
            logger.error(f"Error during group assessment for {name}: {e}")
            return UNKNOWN_GROUP

        if group_id == UNKNOWN_GROUP:
            logger.info(f"No group match for {name}")
        else:
            logger.info(f"Resolved {name} -> {group_id}")
        return group_id

    def resolve_from_identifier(self, seed: str) -> str:
        """Breadth-first search from a known QID."""
        state = ResolutionState(seed)

        while state.queue:
            level = state.pop_level()

            group_id = self._match(level)
            if group_id is not None:
                return group_id

            for current in level:
                entity = self.wikidata.fetch_claims(current)

                state.enqueue(entity.parent_identifier)
                for identifier in entity.related_name_identifiers:
                    state.enqueue(identifier)
                state.enqueue(self.overrides.get(current))
                for identifier in entity.conceptual_identifiers:
                    state.enqueue(identifier)

        return UNKNOWN_GROUP

    def _match(self, level: list[str]) -> str | None:
        """Reported group of the highest-priority group item in `level`."""
        matches = [
            group for group in map(self.registry.get_by_external_id, level)
            if group is not None
        ]
        if not matches:
            return None

        group = min(matches, key=lambda g: self.registry.priority(g.id))
        logger.debug(f"Matched {group.external_id} -> {group.id}")
        return self.output_map.get(group.id, group.id)

    def resolve_batch(self, names: list[str], language: str = "en") -> dict[str, str]:
        """Resolve several names sequentially."""
        return {name: self.resolve_group(name, language) for name in names}
