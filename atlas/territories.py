from __future__ import annotations

"""Static territory definitions and adjacency helpers."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple

from .resource_types import TradeResource
from .terrain import TerrainType


@dataclass(frozen=True)
class TerritoryDefinition:
    id: str
    name: str
    owner: str
    terrain: TerrainType
    neighbors: Tuple[str, ...]
    resources: Tuple[TradeResource, ...] = ()
    coastal: bool = False


def _t(
    id: str,
    name: str,
    owner: str,
    terrain: TerrainType,
    neighbors: Iterable[str],
    resources: Iterable[TradeResource] = (),
) -> TerritoryDefinition:
    return TerritoryDefinition(
        id=id,
        name=name,
        owner=owner,
        terrain=terrain,
        neighbors=tuple(neighbors),
        resources=tuple(resources),
        coastal=terrain is TerrainType.COASTAL,
    )


T = TerrainType
R = TradeResource

# Order matters: it is the canonical iteration order of the engine.
TERRITORY_DEFINITIONS: Tuple[TerritoryDefinition, ...] = (
    _t("akkad_sumer", "Sumer", "akkad", T.RIVER,
       ["akkad_kish", "assyria_heartland", "medes_zagros"], [R.GRAIN]),
    _t("akkad_kish", "Kish", "akkad", T.PLAINS,
       ["egypt_delta", "akkad_sumer"], [R.COPPER]),
    _t("assyria_heartland", "Assyrian Heartland", "assyria", T.RIVER,
       ["assyria_nineveh", "akkad_sumer", "medes_zagros"], [R.GRAIN]),
    _t("assyria_nineveh", "Nineveh", "assyria", T.HILLS,
       ["hittites_cilicia", "assyria_heartland", "scythia_caucasus"], [R.COPPER]),
    _t("carthage_carthage", "Carthage", "carthage", T.COASTAL,
       ["rome_campania", "carthage_numidia", "minoa_crete"], [R.TIMBER]),
    _t("carthage_numidia", "Numidia", "carthage", T.DESERT,
       ["carthage_carthage", "egypt_thebes"], [R.HORSES]),
    _t("egypt_delta", "Nile Delta", "egypt", T.RIVER,
       ["egypt_thebes", "minoa_crete", "hittites_cilicia", "akkad_kish"], [R.GRAIN, R.PAPYRUS]),
    _t("egypt_thebes", "Thebes", "egypt", T.DESERT,
       ["carthage_numidia", "egypt_delta"], [R.COPPER]),
    _t("harappa_indus", "Indus Valley", "harappa", T.RIVER,
       ["harappa_sindh", "shang_yellow_plain"], [R.GRAIN]),
    _t("harappa_sindh", "Sindh", "harappa", T.DESERT,
       ["medes_ecbatana", "harappa_indus"], [R.TIN]),
    _t("hittites_hattusa", "Hattusa", "hittites", T.HILLS,
       ["minoa_cyclades", "hittites_cilicia", "scythia_caucasus"], [R.COPPER]),
    _t("hittites_cilicia", "Cilicia", "hittites", T.MOUNTAIN,
       ["hittites_hattusa", "egypt_delta", "assyria_nineveh"], [R.TIN]),
    _t("medes_ecbatana", "Ecbatana", "medes", T.MOUNTAIN,
       ["medes_zagros", "scythia_pontic", "harappa_sindh"], [R.HORSES]),
    _t("medes_zagros", "Zagros", "medes", T.MOUNTAIN,
       ["assyria_heartland", "akkad_sumer", "medes_ecbatana"], [R.TIN]),
    _t("minoa_crete", "Crete", "minoa", T.COASTAL,
       ["carthage_carthage", "egypt_delta", "minoa_cyclades"], [R.TIMBER]),
    _t("minoa_cyclades", "Cyclades", "minoa", T.COASTAL,
       ["minoa_crete", "rome_campania", "hittites_hattusa"], [R.COPPER]),
    _t("rome_latium", "Latium", "rome", T.PLAINS,
       ["rome_etruria", "rome_campania"], [R.GRAIN]),
    _t("rome_etruria", "Etruria", "rome", T.HILLS,
       ["rome_latium"], [R.TIMBER]),
    _t("rome_campania", "Campania", "rome", T.COASTAL,
       ["rome_latium", "carthage_carthage", "minoa_cyclades"], [R.GRAIN]),
    _t("scythia_pontic", "Pontic Steppe", "scythia", T.STEPPE,
       ["scythia_caucasus", "medes_ecbatana"], [R.HORSES]),
    _t("scythia_caucasus", "Caucasus", "scythia", T.MOUNTAIN,
       ["hittites_hattusa", "assyria_nineveh", "scythia_pontic"], [R.TIMBER]),
    _t("shang_yellow_plain", "Yellow River Plain", "shang", T.PLAINS,
       ["harappa_indus", "shang_anyang"], [R.GRAIN]),
    _t("shang_anyang", "Anyang", "shang", T.RIVER,
       ["shang_yellow_plain"], [R.PAPYRUS, R.TIMBER]),
)

del T, R


def find_asymmetric_edges(
    definitions: Iterable[TerritoryDefinition],
) -> List[Tuple[str, str]]:
    """Return ``(a, b)`` pairs where ``b`` is a neighbor of ``a`` but not the reverse."""
    by_id: Dict[str, TerritoryDefinition] = {d.id: d for d in definitions}
    problems: List[Tuple[str, str]] = []
    for definition in by_id.values():
        for neighbor in definition.neighbors:
            other = by_id.get(neighbor)
            if other is None or definition.id not in other.neighbors:
                problems.append((definition.id, neighbor))
    return problems


def validate_adjacency(definitions: Iterable[TerritoryDefinition]) -> None:
    """Raise ``ValueError`` if the adjacency graph is not undirected."""
    problems = find_asymmetric_edges(definitions)
    if problems:
        pairs = ", ".join(f"{a}->{b}" for a, b in problems)
        raise ValueError(f"Territory adjacency is not symmetric: {pairs}")


def are_adjacent(territories: Mapping[str, object], a: str, b: str) -> bool:
    source = territories.get(a)
    return source is not None and b in getattr(source, "neighbors", ())


validate_adjacency(TERRITORY_DEFINITIONS)

__all__ = [
    "TerritoryDefinition",
    "TERRITORY_DEFINITIONS",
    "find_asymmetric_edges",
    "validate_adjacency",
    "are_adjacent",
]
