"""
Group Registry - Ordered table of biological classification groups.

Each group carries a display colour, an icon, a phylogenetic label and,
for groups that can be reached in the Wikidata graph, the QID of the
node that identifies the group.

Order matters: when several groups could match, the first one listed wins.
"""
from dataclasses import dataclass
from functools import lru_cache


UNKNOWN_GROUP = "unknown"


@dataclass(frozen=True)
class Group:
    """One category of the classification taxonomy."""

    id: str
    label: str
    external_id: str | None  # Wikidata QID, None for text-only groups
    display_color: str
    icon: str
    explainer: str = ""


# Kingdom Animalia classes first (most specific first), then plants, fungi
DEFAULT_GROUPS: tuple[Group, ...] = (
    Group(
        id="mammal",
        label="Mammalia",
        external_id="Q7377",
        display_color="#FFDDAA",
        icon="🐘",
        explainer="Warm-blooded vertebrates, typically covered in hair or fur, nurse their young.",
    ),
    Group(
        id="bird",
        label="Aves",
        external_id="Q5113",
        display_color="#49c0c0ff",
        icon="🐦",
        explainer="Warm-blooded vertebrates, feathered, lay hard-shelled eggs, usually capable of flight.",
    ),
    Group(
        id="reptile",
        label="Reptilia",
        external_id="Q10811",
        display_color="#80AA50FF",
        icon="🐍",
        explainer=(
            "Cold-blooded vertebrates, covered in scales or bony plates, lay amniotic eggs. "
            "(Includes snakes, lizards, turtles)."
        ),
    ),
    Group(
        id="amphibian",
        label="Amphibia",
        external_id="Q10908",
        display_color="#50B080FF",
        icon="🐸",
        explainer=(
            "Cold-blooded vertebrates, typically smooth/moist skin, undergo metamorphosis "
            "(water/land lifecycle)."
        ),
    ),
    Group(
        id="fish",
        label="Pisces",
        external_id="Q2089675",
        display_color="#20A0B0FF",
        icon="🐠",
        explainer="Aquatic vertebrates, typically scaly, breathe through gills, fins for movement.",
    ),
    Group(
        id="arachnid",
        label="Arachnida",
        external_id="Q1358",
        display_color="#808080FF",
        icon="🕷️",
        explainer=(
            "Arthropods with two body sections (cephalothorax, abdomen) and eight legs. "
            "(Includes spiders, scorpions, ticks)."
        ),
    ),
    Group(
        id="insect",
        label="Insecta",
        external_id="Q1390",
        display_color="#B09060FF",
        icon="🐜",
        explainer=(
            "Arthropods with three body sections (head, thorax, abdomen), six legs, "
            "and usually one or two pairs of wings."
        ),
    ),
    Group(
        id="mollusk",
        label="Mollusca",
        external_id="Q43219",
        display_color="#A0C0E0FF",
        icon="🐌",
        explainer=(
            "Soft-bodied, unsegmented invertebrates, often enclosed in a shell. "
            "(Includes snails, slugs, clams, octopus)."
        ),
    ),
    Group(
        id="other_arthropod",
        label="Arthropoda",
        external_id="Q21",
        display_color="#D09080FF",
        icon="🦀",
        explainer=(
            "Creatures with segmented bodies, hard exoskeletons, and jointed limbs. "
            "(Includes crabs, shrimp, centipedes, millipedes)."
        ),
    ),
    Group(
        id="invertebrate",
        label="Animalia",
        external_id="Q34091",
        display_color="#FFDDAA",
        icon="🪱",
        explainer="Catch-all for other animals without backbones (e.g., worms, jellyfish, starfish).",
    ),
    Group(
        id="plant",
        label="Plantae",
        external_id="Q756",
        display_color="#88DD88FF",
        icon="🌿",
        explainer=(
            "General category for organisms that photosynthesize. "
            "Used as a fallback for non-woody, non-grass plants."
        ),
    ),
    Group(
        id="grass",
        label="Plantae",
        external_id="Q34723",
        display_color="#CCFFCC",
        icon="🌾",
        explainer=(
            "Non-woody plants, often small or flexible-stemmed. "
            "(Includes true grasses, wildflowers, shrubs, ferns)."
        ),
    ),
    Group(
        id="tree",
        label="Plantae",
        external_id="Q7541",
        display_color="#55BB55FF",
        icon="🌳",
        explainer="Large, woody, perennial plants with a single stem or trunk.",
    ),
    Group(
        id="fungi",
        label="Fungi",
        external_id="Q7705",
        display_color="#E0E0A0FF",
        icon="🍄",
        explainer=(
            "Non-photosynthetic organisms that reproduce via spores. "
            "(Includes Mushroom, molds, yeasts)."
        ),
    ),
    Group(
        id=UNKNOWN_GROUP,
        label="Unknown",
        external_id=None,
        display_color="#B4FAB4",
        icon="🌎",
        explainer="Species with unidentified biological classification.",
    ),
)


class GroupRegistry:
    """
    Immutable, ordered registry of classification groups.

    Lookups by id and by external id are precomputed from the same ordered
    tuple, so registry order still decides which group wins a tie.
    """

    def __init__(self, groups: tuple[Group, ...] | list[Group] = DEFAULT_GROUPS):
        """
        Build a registry.

        Args:
            groups: Groups in priority order

        Raises:
            ValueError: If ids or external ids repeat, or if there is not
                exactly one fallback group (one without an external id).
        """
        self._groups = tuple(groups)
        self._by_id: dict[str, Group] = {}
        self._by_external_id: dict[str, Group] = {}
        self._priority: dict[str, int] = {}

        fallbacks = [g for g in self._groups if g.external_id is None]
        if len(fallbacks) != 1:
            raise ValueError(
                f"Registry needs exactly one group without external id, found {len(fallbacks)}"
            )
        self._fallback = fallbacks[0]

        for group in self._groups:
            if group.id in self._by_id:
                raise ValueError(f"Duplicate group id: {group.id}")
            self._by_id[group.id] = group
            self._priority[group.id] = len(self._priority)

            if group.external_id is not None:
                if group.external_id in self._by_external_id:
                    raise ValueError(f"Duplicate external id: {group.external_id}")
                self._by_external_id[group.external_id] = group

    def __iter__(self):
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    @property
    def fallback(self) -> Group:
        """The universal fallback group ("unknown")."""
        return self._fallback

    @property
    def ids(self) -> list[str]:
        """All group ids in registry order."""
        return [g.id for g in self._groups]

    def lookup(self, group_id: str) -> Group:
        """Get a group by id, or the fallback group if the id is not known."""
        return self._by_id.get(group_id, self._fallback)

    def priority(self, group_id: str) -> int:
        """Position in registry order; lower wins. Unknown ids rank last."""
        return self._priority.get(group_id, len(self._groups))

    def get_by_external_id(self, external_id: str | None) -> Group | None:
        """Get the group identified by a Wikidata QID, if any."""
        if external_id is None:
            return None
        return self._by_external_id.get(external_id)

    def groups_with_external_id(self) -> list[tuple[str, str]]:
        """(id, external_id) pairs in registry order."""
        return [(g.id, g.external_id) for g in self._groups if g.external_id is not None]

    def color(self, group_id: str) -> str:
        return self.lookup(group_id).display_color

    def icon(self, group_id: str) -> str:
        return self.lookup(group_id).icon

    def background_color(self, group_id: str) -> str:
        """
        Very light tint of the group colour, for card backgrounds.

        Blends 10% of the group colour with 90% white. Unknown ids get a
        neutral light grey.
        """
        if group_id not in self._by_id:
            return "#f9f9f9"

        hex_code = self._by_id[group_id].display_color.lstrip("#")
        r, g, b = (int(hex_code[i:i + 2], 16) for i in (0, 2, 4))

        def blend(channel: int) -> int:
            # Round half up
            return int(channel * 0.1 + 255 * 0.9 + 0.5)

        return f"rgb({blend(r)}, {blend(g)}, {blend(b)})"


@lru_cache()
def get_registry() -> GroupRegistry:
    """Get the process-wide default registry."""
    return GroupRegistry(DEFAULT_GROUPS)
