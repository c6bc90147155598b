from __future__ import annotations

"""Reference content: nations, technologies and missions.

Everything a new game is built from lives in a :class:`ContentPack`. The
engine reads the pack through the game state instead of importing module
globals, so tests and tools can swap in their own content.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from atlas.territories import TERRITORY_DEFINITIONS, TerritoryDefinition

from .models import (
    Character,
    FactionStanding,
    MissionProgress,
    Nation,
    StatKey,
    TechState,
    Territory,
)
from .settings import GameConfig


@dataclass(frozen=True)
class NationDefinition:
    id: str
    name: str
    color: str
    description: str
    traits: Tuple[str, ...]
    stats: Dict[StatKey, int]


@dataclass(frozen=True)
class TechNode:
    id: str
    name: str
    prerequisites: Tuple[str, ...] = ()
    bonuses: Dict[StatKey, int] = field(default_factory=dict)


@dataclass(frozen=True)
class MissionObjective:
    """``type`` is one of ``control_territories``, ``stat_threshold`` or ``tech_researched``."""

    type: str
    value: object
    stat: Optional[StatKey] = None


@dataclass(frozen=True)
class MissionReward:
    """``type`` is ``stat`` (needs ``stat``) or ``treasury``."""

    type: str
    amount: int
    stat: Optional[StatKey] = None


@dataclass(frozen=True)
class MissionDefinition:
    id: str
    name: str
    objectives: Tuple[MissionObjective, ...]
    rewards: Tuple[MissionReward, ...]
    prerequisites: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ContentPack:
    nations: Tuple[NationDefinition, ...]
    territories: Tuple[TerritoryDefinition, ...]
    config: GameConfig = GameConfig()
    techs: Tuple[TechNode, ...] = ()
    missions: Tuple[MissionDefinition, ...] = ()

    def nation(self, nation_id: str) -> Optional[NationDefinition]:
        for definition in self.nations:
            if definition.id == nation_id:
                return definition
        return None

    def tech(self, tech_id: str) -> Optional[TechNode]:
        for node in self.techs:
            if node.id == tech_id:
                return node
        return None

    def mission(self, mission_id: str) -> Optional[MissionDefinition]:
        for mission in self.missions:
            if mission.id == mission_id:
                return mission
        return None

    @property
    def tech_tree(self) -> Dict[str, List[str]]:
        return {node.id: list(node.prerequisites) for node in self.techs}


def _stats(
    stability: int,
    military: int,
    tech: int,
    economy: int,
    crime: int,
    influence: int,
    support: int,
    science: int,
    laws: int,
) -> Dict[StatKey, int]:
    return {
        StatKey.STABILITY: stability,
        StatKey.MILITARY: military,
        StatKey.TECH: tech,
        StatKey.ECONOMY: economy,
        StatKey.CRIME: crime,
        StatKey.INFLUENCE: influence,
        StatKey.SUPPORT: support,
        StatKey.SCIENCE: science,
        StatKey.LAWS: laws,
    }


NATION_DEFINITIONS: Tuple[NationDefinition, ...] = (
    NationDefinition("akkad", "Akkad", "#c2a05a",
                     "First empire of Mesopotamia, quick to take up arms.",
                     ("conquerors",), _stats(62, 66, 45, 55, 30, 50, 58, 40, 48)),
    NationDefinition("assyria", "Assyria", "#8c3b2f",
                     "Iron-fisted kingdom ruling from the Tigris.",
                     ("heartland levies", "iron discipline"), _stats(64, 72, 48, 54, 32, 52, 60, 42, 55)),
    NationDefinition("carthage", "Carthage", "#7a3fa0",
                     "Merchant republic whose fleets and mercenaries reach every shore.",
                     ("mercenaries", "merchant princes"), _stats(63, 50, 50, 70, 28, 60, 55, 48, 50)),
    NationDefinition("egypt", "Egypt", "#d8b64b",
                     "Ancient kingdom of the Nile bound together by law and priesthood.",
                     ("divine law",), _stats(72, 55, 55, 62, 22, 64, 66, 58, 62)),
    NationDefinition("harappa", "Harappa", "#4f8f6b",
                     "Planned cities of the Indus trading far and wide.",
                     ("planned cities",), _stats(66, 45, 52, 68, 20, 50, 62, 56, 58)),
    NationDefinition("hittites", "Hittites", "#9a6b3c",
                     "Anatolian chariot lords and treaty makers.",
                     ("chariot lords",), _stats(60, 64, 56, 52, 30, 48, 57, 46, 52)),
    NationDefinition("medes", "Medes", "#5c6fa8",
                     "Mountain confederation of the Iranian plateau.",
                     ("highland tribes",), _stats(58, 60, 44, 50, 34, 46, 54, 38, 46)),
    NationDefinition("minoa", "Minoa", "#3b8dc4",
                     "Island thalassocracy of palaces and sea lanes.",
                     ("sea lanes",), _stats(65, 42, 54, 66, 24, 58, 63, 52, 50)),
    NationDefinition("rome", "Rome", "#b22222",
                     "Young republic on the Tiber with a taste for order.",
                     ("legions", "republican law"), _stats(70, 60, 50, 58, 28, 55, 60, 45, 56)),
    NationDefinition("scythia", "Scythia", "#a0522d",
                     "Horse nomads of the Pontic steppe.",
                     ("horse archers",), _stats(55, 70, 36, 44, 38, 40, 56, 30, 36)),
    NationDefinition("shang", "Shang", "#2f6b4f",
                     "Bronze-casting dynasty of the Yellow River.",
                     ("oracle bones",), _stats(68, 58, 60, 60, 26, 54, 64, 62, 60)),
)

TECH_NODES: Tuple[TechNode, ...] = (
    TechNode("BronzeWorking", "Bronze Working", (), {StatKey.MILITARY: 3}),
    TechNode("Irrigation", "Irrigation", (), {StatKey.ECONOMY: 3}),
    TechNode("TradeCaravans", "Trade Caravans", ("Irrigation",), {StatKey.ECONOMY: 2, StatKey.INFLUENCE: 2}),
    TechNode("SiegeEngineering", "Siege Engineering", ("BronzeWorking",), {StatKey.MILITARY: 4}),
    TechNode("NavalLogistics", "Naval Logistics", ("BronzeWorking",), {StatKey.ECONOMY: 2}),
    TechNode("IronWorking", "Iron Working", ("BronzeWorking",), {StatKey.MILITARY: 4, StatKey.TECH: 2}),
    TechNode("Mathematics", "Mathematics", ("BronzeWorking",), {StatKey.SCIENCE: 4}),
    TechNode("Astronomy", "Astronomy", ("Mathematics",), {StatKey.SCIENCE: 3, StatKey.INFLUENCE: 2}),
    TechNode("SiegeMasters", "Siege Masters", ("SiegeEngineering", "IronWorking"), {StatKey.MILITARY: 6}),
    TechNode("NavalDominance", "Naval Dominance", ("NavalLogistics", "Mathematics"),
             {StatKey.INFLUENCE: 4, StatKey.ECONOMY: 2}),
    TechNode("ImperialBureaucracy", "Imperial Bureaucracy", ("TradeCaravans",),
             {StatKey.LAWS: 4, StatKey.STABILITY: 2}),
)

MISSION_DEFINITIONS: Tuple[MissionDefinition, ...] = (
    MissionDefinition(
        "secure_homeland",
        "Secure the Homeland",
        (MissionObjective("stat_threshold", 60, StatKey.STABILITY),),
        (MissionReward("treasury", 10),),
    ),
    MissionDefinition(
        "age_of_bronze",
        "The Age of Bronze",
        (MissionObjective("tech_researched", ("BronzeWorking",)),),
        (MissionReward("stat", 3, StatKey.MILITARY),),
    ),
    MissionDefinition(
        "regional_power",
        "Regional Power",
        (MissionObjective("control_territories", 5),),
        (MissionReward("stat", 5, StatKey.INFLUENCE), MissionReward("treasury", 15)),
        prerequisites=("secure_homeland",),
    ),
    MissionDefinition(
        "house_of_learning",
        "House of Learning",
        (
            MissionObjective("stat_threshold", 60, StatKey.SCIENCE),
            MissionObjective("tech_researched", ("Mathematics",)),
        ),
        (MissionReward("stat", 4, StatKey.TECH),),
        prerequisites=("age_of_bronze",),
    ),
)

DEFAULT_FACTIONS: Tuple[Tuple[str, int], ...] = (
    ("Military", 62),
    ("Priesthood", 58),
    ("Merchants", 60),
    ("Nobility", 55),
)

# (role, expertise) of the court every nation starts with
DEFAULT_COURT: Tuple[Tuple[str, str], ...] = (
    ("Ruler", "statecraft"),
    ("General", "warfare"),
    ("Scholar", "science"),
)

DEFAULT_CONTENT = ContentPack(
    nations=NATION_DEFINITIONS,
    territories=TERRITORY_DEFINITIONS,
    config=GameConfig(),
    techs=TECH_NODES,
    missions=MISSION_DEFINITIONS,
)


def build_initial_nation_state(definition: NationDefinition, config: GameConfig) -> Nation:
    return Nation(
        id=definition.id,
        name=definition.name,
        color=definition.color,
        description=definition.description,
        traits=list(definition.traits),
        stats=dict(definition.stats),
        treasury=config.starting_treasury,
        factions=[FactionStanding(name, support) for name, support in DEFAULT_FACTIONS],
        characters=[
            Character(
                id=f"{definition.id}-{role.lower()}",
                name=f"{role} of {definition.name}",
                role=role,
                expertise=expertise,
            )
            for role, expertise in DEFAULT_COURT
        ],
        tech=TechState(),
        missions=MissionProgress(),
    )


def build_initial_territory_state(definition: TerritoryDefinition, config: GameConfig) -> Territory:
    return Territory(
        id=definition.id,
        name=definition.name,
        owner=definition.owner,
        terrain=definition.terrain,
        neighbors=list(definition.neighbors),
        resources=list(definition.resources),
        coastal=definition.coastal,
        garrison=config.starting_garrison,
        development=config.starting_development,
        unrest=config.starting_unrest,
        morale=config.starting_morale,
        supply=config.starting_supply,
        siege_progress=0,
    )


__all__ = [
    "NationDefinition",
    "TechNode",
    "MissionObjective",
    "MissionReward",
    "MissionDefinition",
    "ContentPack",
    "NATION_DEFINITIONS",
    "TECH_NODES",
    "MISSION_DEFINITIONS",
    "DEFAULT_FACTIONS",
    "DEFAULT_COURT",
    "DEFAULT_CONTENT",
    "build_initial_nation_state",
    "build_initial_territory_state",
]
