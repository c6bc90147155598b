from __future__ import annotations

"""Data model of a running game."""

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Deque,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    TypeVar,
)

from atlas.resource_types import TradeResource
from atlas.terrain import TerrainType
from atlas.visibility import Visibility

from .diplomacy import DiplomacyState
from .mechanics import clamp
from .settings import (
    BATTLE_REPORT_CAPACITY,
    LOG_CAPACITY,
    NOTIFICATION_CAPACITY,
    STAT_MAX,
    STAT_MIN,
    STRAINED_THRESHOLD,
    SUPPLIED_THRESHOLD,
)

if TYPE_CHECKING:
    from .data import ContentPack


# --------------------------------------------------------------------
# Enumerations
# --------------------------------------------------------------------
class StatKey(Enum):
    STABILITY = "stability"
    MILITARY = "military"
    TECH = "tech"
    ECONOMY = "economy"
    CRIME = "crime"
    INFLUENCE = "influence"
    SUPPORT = "support"
    SCIENCE = "science"
    LAWS = "laws"


class ActionType(Enum):
    """Every order a nation can issue during a turn."""

    INVEST_IN_TECH = "InvestInTech"
    RECRUIT_ARMY = "RecruitArmy"
    MOVE_ARMY = "MoveArmy"
    COLLECT_TAXES = "CollectTaxes"
    PASS_LAW = "PassLaw"
    SPY = "Spy"
    DIPLOMACY_OFFER = "DiplomacyOffer"
    DECLARE_WAR = "DeclareWar"
    FORM_ALLIANCE = "FormAlliance"
    BRIBE = "Bribe"
    SUPPRESS_CRIME = "SuppressCrime"


class Phase(Enum):
    SELECTION = "selection"
    PLAYER = "player"
    AI = "ai"
    EVENTS = "events"
    GAMEOVER = "gameover"


class Archetype(Enum):
    EXPANSIONIST = "Expansionist"
    DEFENSIVE = "Defensive"
    OPPORTUNISTIC = "Opportunistic"


class SupplyState(Enum):
    SUPPLIED = "supplied"
    STRAINED = "strained"
    EXHAUSTED = "exhausted"


class CombatOutcome(Enum):
    ATTACKER_VICTORY = "attackerVictory"
    DEFENDER_HOLDS = "defenderHolds"
    STALEMATE = "stalemate"


class LogType(Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class Tone(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


def supply_state_for(supply: float) -> SupplyState:
    if supply >= SUPPLIED_THRESHOLD:
        return SupplyState.SUPPLIED
    if supply >= STRAINED_THRESHOLD:
        return SupplyState.STRAINED
    return SupplyState.EXHAUSTED


# --------------------------------------------------------------------
# Bounded logs
# --------------------------------------------------------------------
T = TypeVar("T")


class BoundedLog(Generic[T]):
    """Newest-first list that silently drops its oldest entries past ``capacity``."""

    def __init__(self, capacity: int, items: Iterable[T] = ()) -> None:
        self.capacity = capacity
        self._items: Deque[T] = deque(maxlen=capacity)
        for item in items:
            if len(self._items) >= capacity:
                break
            self._items.append(item)

    def push(self, item: T) -> None:
        self._items.appendleft(item)

    def clear(self) -> None:
        self._items.clear()

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BoundedLog):
            return NotImplemented
        return self.capacity == other.capacity and list(self._items) == list(other._items)

    def __repr__(self) -> str:
        return f"BoundedLog(capacity={self.capacity}, items={list(self._items)!r})"


# --------------------------------------------------------------------
# Nations
# --------------------------------------------------------------------
@dataclass
class ArmyUnit:
    id: str
    territory_id: str
    strength: int


@dataclass
class FactionStanding:
    """Support of one internal faction (military, priesthood, ...) for the ruler."""

    name: str
    support: int


@dataclass
class Character:
    id: str
    name: str
    role: str
    expertise: str
    loyalty: int = 60


@dataclass
class TechState:
    researched: List[str] = field(default_factory=list)
    focus: Optional[str] = None
    progress: Dict[str, int] = field(default_factory=dict)


@dataclass
class MissionProgress:
    active: List[str] = field(default_factory=list)
    completed: List[str] = field(default_factory=list)


@dataclass
class EconomySummary:
    """Breakdown of the last trade settlement, kept for display."""

    trade_income: float = 0.0
    maintenance: float = 0.0
    import_costs: float = 0.0
    smuggling: float = 0.0
    blocked_routes: int = 0
    net: int = 0


@dataclass
class Nation:
    id: str
    name: str
    color: str
    description: str
    traits: List[str]
    stats: Dict[StatKey, int]
    treasury: int = 0
    armies: List[ArmyUnit] = field(default_factory=list)
    archetype: Optional[Archetype] = None
    factions: List[FactionStanding] = field(default_factory=list)
    characters: List[Character] = field(default_factory=list)
    tech: TechState = field(default_factory=TechState)
    missions: MissionProgress = field(default_factory=MissionProgress)
    economy: EconomySummary = field(default_factory=EconomySummary)

    def stat(self, key: StatKey) -> int:
        return self.stats.get(key, 0)

    def faction_support(self, name: str) -> Optional[int]:
        for standing in self.factions:
            if standing.name == name:
                return standing.support
        return None


# --------------------------------------------------------------------
# Territories
# --------------------------------------------------------------------
@dataclass
class Territory:
    """A region on the map.

    ``supply_state`` is derived from ``supply`` on every read so the two can
    never disagree.
    """

    id: str
    name: str
    owner: str
    terrain: TerrainType
    neighbors: List[str]
    resources: List[TradeResource] = field(default_factory=list)
    coastal: bool = False
    garrison: int = 0
    development: int = 50
    unrest: int = 0
    morale: int = 70
    supply: int = 80
    siege_progress: int = 0

    @property
    def supply_state(self) -> SupplyState:
        return supply_state_for(self.supply)


# --------------------------------------------------------------------
# Records
# --------------------------------------------------------------------
@dataclass(frozen=True)
class CombatResult:
    attacker_id: str
    defender_id: str
    territory_id: str
    outcome: CombatOutcome
    attacker_loss: int
    defender_loss: int
    siege_progress: int
    attacker_supply_penalty: int
    defender_supply_penalty: int
    attacker_power: float = 0.0
    defender_power: float = 0.0
    turn: int = 0


@dataclass
class LogEntry:
    id: str
    turn: int
    message: str
    type: LogType = LogType.INFO


@dataclass
class Notification:
    id: str
    turn: int
    message: str
    tone: Tone = Tone.NEUTRAL


@dataclass(frozen=True)
class PlayerAction:
    """One order. Fields a given action type does not use stay ``None``."""

    type: ActionType
    target_nation_id: Optional[str] = None
    source_territory_id: Optional[str] = None
    target_territory_id: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.type, ActionType):
            object.__setattr__(self, "type", ActionType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type.value}
        if self.target_nation_id is not None:
            data["targetNationId"] = self.target_nation_id
        if self.source_territory_id is not None:
            data["sourceTerritoryId"] = self.source_territory_id
        if self.target_territory_id is not None:
            data["targetTerritoryId"] = self.target_territory_id
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerAction":
        return cls(
            type=ActionType(data["type"]),
            target_nation_id=data.get("targetNationId"),
            source_territory_id=data.get("sourceTerritoryId"),
            target_territory_id=data.get("targetTerritoryId"),
        )


@dataclass
class ReplayEntry:
    """A recorded player action, or the end of a turn when ``action`` is ``None``."""

    turn: int
    action: Optional[PlayerAction] = None


@dataclass
class ReplayLog:
    seed: int
    entries: List[ReplayEntry] = field(default_factory=list)


@dataclass
class TradeRoute:
    id: str
    from_id: str
    to_id: str
    mode: str
    blocked: bool = False


@dataclass
class TradeState:
    prices: Dict[TradeResource, float] = field(default_factory=dict)
    history: Dict[TradeResource, List[float]] = field(default_factory=dict)
    routes: List[TradeRoute] = field(default_factory=list)


# --------------------------------------------------------------------
# Game state
# --------------------------------------------------------------------
def _log() -> BoundedLog[LogEntry]:
    return BoundedLog(LOG_CAPACITY)


def _notifications() -> BoundedLog[Notification]:
    return BoundedLog(NOTIFICATION_CAPACITY)


def _battle_reports() -> BoundedLog[CombatResult]:
    return BoundedLog(BATTLE_REPORT_CAPACITY)


@dataclass
class GameState:
    player_nation_id: str
    nations: Dict[str, Nation]
    territories: Dict[str, Territory]
    diplomacy: DiplomacyState = field(default_factory=DiplomacyState)
    turn: int = 1
    phase: Phase = Phase.PLAYER
    actions_taken: int = 0
    log: BoundedLog[LogEntry] = field(default_factory=_log)
    notifications: BoundedLog[Notification] = field(default_factory=_notifications)
    battle_reports: BoundedLog[CombatResult] = field(default_factory=_battle_reports)
    queued_events: List[str] = field(default_factory=list)
    winner: Optional[str] = None
    defeated: bool = False
    visibility: Dict[str, Dict[str, Visibility]] = field(default_factory=dict)
    ironman: bool = False
    trade: TradeState = field(default_factory=TradeState)
    replay: ReplayLog = field(default_factory=lambda: ReplayLog(seed=0))
    sequence: int = 0
    rng_state: Optional[int] = None
    content: Optional["ContentPack"] = field(default=None, compare=False, repr=False)

    @property
    def player(self) -> Nation:
        return self.nations[self.player_nation_id]

    @property
    def is_over(self) -> bool:
        return self.phase is Phase.GAMEOVER

    def player_view(self) -> Dict[str, Visibility]:
        return self.visibility.get(self.player_nation_id, {})

    def next_id(self, prefix: str) -> str:
        self.sequence += 1
        return f"{prefix}-{self.turn}-{self.sequence}"


# --------------------------------------------------------------------
# Mutation helpers
# --------------------------------------------------------------------
def clamp_stat(value: float) -> int:
    return int(clamp(value, STAT_MIN, STAT_MAX))


def update_stat(nation: Nation, key: StatKey, delta: float) -> int:
    """Shift one stat meter, keeping it inside ``[0, 100]``."""
    value = clamp_stat(nation.stats.get(key, 0) + delta)
    nation.stats[key] = value
    return value


def adjust_treasury(nation: Nation, delta: int) -> int:
    nation.treasury = max(0, nation.treasury + delta)
    return nation.treasury


def adjust_garrison(territory: Territory, delta: int) -> int:
    territory.garrison = max(0, territory.garrison + delta)
    return territory.garrison


def adjust_supply(territory: Territory, delta: float) -> int:
    territory.supply = clamp_stat(territory.supply + delta)
    return territory.supply


def adjust_morale(territory: Territory, delta: float) -> int:
    territory.morale = clamp_stat(territory.morale + delta)
    return territory.morale


def set_siege_progress(territory: Territory, value: float) -> int:
    territory.siege_progress = clamp_stat(value)
    return territory.siege_progress


def controlled_territories(state: GameState, nation_id: str) -> List[Territory]:
    return [t for t in state.territories.values() if t.owner == nation_id]


def push_log(state: GameState, message: str, type: LogType = LogType.INFO) -> LogEntry:
    entry = LogEntry(id=state.next_id("log"), turn=state.turn, message=message, type=type)
    state.log.push(entry)
    return entry


def push_notification(state: GameState, message: str, tone: Tone = Tone.NEUTRAL) -> Notification:
    notification = Notification(id=state.next_id("note"), turn=state.turn, message=message, tone=tone)
    state.notifications.push(notification)
    return notification


def army_id(nation_id: str, territory_id: str) -> str:
    return f"{nation_id}-{territory_id}"


def remove_army(nation: Nation, territory_id: str) -> None:
    nation.armies = [a for a in nation.armies if a.territory_id != territory_id]


def station_army(nation: Nation, territory_id: str, strength: int) -> None:
    for army in nation.armies:
        if army.territory_id == territory_id:
            army.strength = strength
            return
    nation.armies.append(ArmyUnit(army_id(nation.id, territory_id), territory_id, strength))


def refresh_armies(state: GameState) -> None:
    """Rebuild every nation's army records from the garrisons on the map."""
    for nation in state.nations.values():
        nation.armies = [
            ArmyUnit(army_id(nation.id, t.id), t.id, t.garrison)
            for t in controlled_territories(state, nation.id)
            if t.garrison > 0
        ]


__all__ = [
    "StatKey",
    "ActionType",
    "Phase",
    "Archetype",
    "SupplyState",
    "CombatOutcome",
    "LogType",
    "Tone",
    "supply_state_for",
    "BoundedLog",
    "ArmyUnit",
    "FactionStanding",
    "Character",
    "TechState",
    "MissionProgress",
    "EconomySummary",
    "Nation",
    "Territory",
    "CombatResult",
    "LogEntry",
    "Notification",
    "PlayerAction",
    "ReplayEntry",
    "ReplayLog",
    "TradeRoute",
    "TradeState",
    "GameState",
    "clamp_stat",
    "update_stat",
    "adjust_treasury",
    "adjust_garrison",
    "adjust_supply",
    "adjust_morale",
    "set_siege_progress",
    "controlled_territories",
    "push_log",
    "push_notification",
    "army_id",
    "remove_army",
    "station_army",
    "refresh_armies",
]
