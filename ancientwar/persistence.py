from __future__ import annotations

import json
import logging
import math
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from atlas.resource_types import TradeResource
from atlas.terrain import TerrainType
from atlas.visibility import Visibility

from .data import (
    DEFAULT_CONTENT,
    ContentPack,
    build_initial_nation_state,
    build_initial_territory_state,
)
from .diplomacy import DiplomacyState, ensure_relation_matrix
from .models import (
    Archetype,
    ArmyUnit,
    BoundedLog,
    Character,
    CombatOutcome,
    CombatResult,
    EconomySummary,
    FactionStanding,
    GameState,
    LogEntry,
    LogType,
    MissionProgress,
    Nation,
    Notification,
    Phase,
    PlayerAction,
    ReplayEntry,
    ReplayLog,
    StatKey,
    TechState,
    Territory,
    Tone,
    TradeRoute,
    TradeState,
    clamp_stat,
)
from .settings import (
    BATTLE_REPORT_CAPACITY,
    LEGACY_SAVE_VERSION,
    LOG_CAPACITY,
    NOTIFICATION_CAPACITY,
    SAVE_VERSION,
)
from .trade import build_initial_trade_state

logger = logging.getLogger("ancientwar.persistence")


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
SAVE_FILE: Path = Path("ancientwar_save.json")
AUTOSAVE_FILE: Path = Path("ancientwar_autosave.json")


# -----------------------------------------------------------------------------
# Custom Exceptions
# -----------------------------------------------------------------------------
class GameSaveError(Exception):
    """Exception raised when saving the game state fails."""


class GameLoadError(Exception):
    """Exception raised when loading the game state fails."""


@dataclass
class MigrationResult:
    """A loaded state together with everything that had to be patched up."""

    state: GameState
    warnings: List[str] = field(default_factory=list)
    migrated_from: Optional[int] = None


# -----------------------------------------------------------------------------
# Serialization
# -----------------------------------------------------------------------------
def serialize_nation(nation: Nation) -> Dict[str, Any]:
    return {
        "id": nation.id,
        "name": nation.name,
        "color": nation.color,
        "description": nation.description,
        "traits": list(nation.traits),
        "stats": {key.value: value for key, value in nation.stats.items()},
        "treasury": nation.treasury,
        "armies": [
            {"id": a.id, "territoryId": a.territory_id, "strength": a.strength}
            for a in nation.armies
        ],
        "archetype": nation.archetype.value if nation.archetype else None,
        "factions": [{"name": f.name, "support": f.support} for f in nation.factions],
        "characters": [
            {
                "id": c.id,
                "name": c.name,
                "role": c.role,
                "expertise": c.expertise,
                "loyalty": c.loyalty,
            }
            for c in nation.characters
        ],
        "tech": {
            "researched": list(nation.tech.researched),
            "focus": nation.tech.focus,
            "progress": dict(nation.tech.progress),
        },
        "missions": {
            "active": list(nation.missions.active),
            "completed": list(nation.missions.completed),
        },
        "economySummary": {
            "tradeIncome": nation.economy.trade_income,
            "maintenance": nation.economy.maintenance,
            "importCosts": nation.economy.import_costs,
            "smugglingFactor": nation.economy.smuggling,
            "blockedRoutes": nation.economy.blocked_routes,
            "net": nation.economy.net,
        },
    }


def serialize_territory(territory: Territory) -> Dict[str, Any]:
    return {
        "id": territory.id,
        "name": territory.name,
        "ownerId": territory.owner,
        "terrain": territory.terrain.value,
        "neighbors": list(territory.neighbors),
        "resources": [r.value for r in territory.resources],
        "coastal": territory.coastal,
        "garrison": territory.garrison,
        "development": territory.development,
        "unrest": territory.unrest,
        "morale": territory.morale,
        "supply": territory.supply,
        "supplyState": territory.supply_state.value,
        "siegeProgress": territory.siege_progress,
    }


def serialize_combat_result(result: CombatResult) -> Dict[str, Any]:
    return {
        "attackerId": result.attacker_id,
        "defenderId": result.defender_id,
        "territoryId": result.territory_id,
        "outcome": result.outcome.value,
        "attackerLoss": result.attacker_loss,
        "defenderLoss": result.defender_loss,
        "siegeProgress": result.siege_progress,
        "attackerSupplyPenalty": result.attacker_supply_penalty,
        "defenderSupplyPenalty": result.defender_supply_penalty,
        "attackerPower": result.attacker_power,
        "defenderPower": result.defender_power,
        "turn": result.turn,
    }


def serialize_state(state: GameState) -> Dict[str, Any]:
    """Convert a game state into a JSON-compatible dictionary."""
    return {
        "saveVersion": SAVE_VERSION,
        "turn": state.turn,
        "currentPhase": state.phase.value,
        "playerNationId": state.player_nation_id,
        "actionsTaken": state.actions_taken,
        "nations": {nid: serialize_nation(n) for nid, n in state.nations.items()},
        "territories": {tid: serialize_territory(t) for tid, t in state.territories.items()},
        "diplomacy": {
            "relations": {a: dict(row) for a, row in state.diplomacy.relations.items()},
            "wars": sorted(state.diplomacy.wars),
            "alliances": sorted(state.diplomacy.alliances),
            "blockades": dict(state.diplomacy.blockades),
        },
        "log": [
            {"id": e.id, "turn": e.turn, "message": e.message, "type": e.type.value}
            for e in state.log
        ],
        "notifications": [
            {"id": n.id, "turn": n.turn, "message": n.message, "tone": n.tone.value}
            for n in state.notifications
        ],
        "battleReports": [serialize_combat_result(r) for r in state.battle_reports],
        "queuedEvents": list(state.queued_events),
        "winner": state.winner,
        "defeated": state.defeated,
        "visibility": {
            nid: {tid: level.value for tid, level in view.items()}
            for nid, view in state.visibility.items()
        },
        "ironman": state.ironman,
        "trade": {
            "prices": {r.value: p for r, p in state.trade.prices.items()},
            "history": {r.value: list(h) for r, h in state.trade.history.items()},
            "routes": [
                {"id": r.id, "from": r.from_id, "to": r.to_id, "mode": r.mode, "blocked": r.blocked}
                for r in state.trade.routes
            ],
        },
        "replay": {
            "seed": state.replay.seed,
            "entries": [
                {"turn": e.turn, "action": e.action.to_dict() if e.action else None}
                for e in state.replay.entries
            ],
        },
        "sequence": state.sequence,
        "rngState": state.rng_state,
    }


def quick_save_state(state: GameState) -> str:
    """Serialize ``state`` into a compact JSON string stamped with the save version."""
    return json.dumps(serialize_state(state), separators=(",", ":"))


# -----------------------------------------------------------------------------
# Field coercion
# -----------------------------------------------------------------------------
def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value!r}")
    return int(value)


def _as_float(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"expected a finite number, got {value!r}")
    return float(value)


def _as_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _as_str(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _as_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return _as_str(value)


def _as_dict(value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise TypeError(f"expected an object, got {type(value).__name__}")
    return value


def _as_list(value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise TypeError(f"expected a list, got {type(value).__name__}")
    return value


def _as_str_list(value: Any) -> List[str]:
    return [entry for entry in _as_list(value) if isinstance(entry, str)]


def _as_phase(value: Any) -> Phase:
    return Phase(value)


class _LoadContext:
    def __init__(self, content: ContentPack) -> None:
        self.content = content
        self.values: Dict[str, Any] = {}
        self.warnings: List[str] = []

    def warn(self, message: str) -> None:
        self.warnings.append(message)


def _describe(value: Any) -> str:
    if isinstance(value, dict):
        return "an empty record" if not value else "defaults"
    if isinstance(value, (list, BoundedLog)):
        return "an empty list" if not len(value) else "defaults"
    if isinstance(value, Phase):
        return f'"{value.value}"'
    if isinstance(value, str):
        return f'"{value}"'
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    return "defaults"


# -----------------------------------------------------------------------------
# Nested records
# -----------------------------------------------------------------------------
def _parse_stats(raw: Any, fallback: Dict[StatKey, int]) -> Dict[StatKey, int]:
    data = _as_dict(raw)
    stats: Dict[StatKey, int] = {}
    for key in StatKey:
        value = data.get(key.value, fallback.get(key, 50))
        stats[key] = clamp_stat(_as_float(value))
    return stats


def _parse_nation(nation_id: str, raw: Any, ctx: _LoadContext) -> Nation:
    data = _as_dict(raw)
    definition = ctx.content.nation(nation_id)
    base = (
        build_initial_nation_state(definition, ctx.content.config)
        if definition is not None
        else None
    )
    tech_raw = data.get("tech") if isinstance(data.get("tech"), dict) else {}
    missions_raw = data.get("missions") if isinstance(data.get("missions"), dict) else {}
    summary_raw = data.get("economySummary") if isinstance(data.get("economySummary"), dict) else {}
    archetype = data.get("archetype")

    return Nation(
        id=nation_id,
        name=str(data.get("name") or (base.name if base else nation_id)),
        color=str(data.get("color") or (base.color if base else "#888888")),
        description=str(data.get("description") or (base.description if base else "")),
        traits=_as_str_list(data.get("traits", base.traits if base else [])),
        stats=_parse_stats(data.get("stats", {}), base.stats if base else {}),
        treasury=max(0, _as_int(data.get("treasury", ctx.content.config.starting_treasury))),
        armies=[
            ArmyUnit(str(a["id"]), str(a["territoryId"]), _as_int(a["strength"]))
            for a in _as_list(data.get("armies", []))
            if isinstance(a, dict)
        ],
        archetype=Archetype(archetype) if archetype else None,
        factions=[
            FactionStanding(str(f["name"]), clamp_stat(_as_float(f["support"])))
            for f in _as_list(data.get("factions", []))
            if isinstance(f, dict)
        ] or (base.factions if base else []),
        characters=[
            Character(
                id=str(c["id"]),
                name=str(c["name"]),
                role=str(c["role"]),
                expertise=str(c.get("expertise", "")),
                loyalty=clamp_stat(_as_float(c.get("loyalty", 60))),
            )
            for c in _as_list(data.get("characters", []))
            if isinstance(c, dict)
        ],
        tech=TechState(
            researched=_as_str_list(tech_raw.get("researched", [])),
            focus=_as_optional_str(tech_raw.get("focus")),
            progress={str(k): _as_int(v) for k, v in _as_dict(tech_raw.get("progress", {})).items()},
        ),
        missions=MissionProgress(
            active=_as_str_list(missions_raw.get("active", [])),
            completed=_as_str_list(missions_raw.get("completed", [])),
        ),
        economy=EconomySummary(
            trade_income=_as_float(summary_raw.get("tradeIncome", 0)),
            maintenance=_as_float(summary_raw.get("maintenance", 0)),
            import_costs=_as_float(summary_raw.get("importCosts", 0)),
            smuggling=_as_float(summary_raw.get("smugglingFactor", 0)),
            blocked_routes=_as_int(summary_raw.get("blockedRoutes", 0)),
            net=_as_int(summary_raw.get("net", 0)),
        ),
    )


def _parse_territory(territory_id: str, raw: Any, ctx: _LoadContext) -> Territory:
    data = _as_dict(raw)
    config = ctx.content.config
    return Territory(
        id=territory_id,
        name=str(data.get("name") or territory_id),
        owner=_as_str(data.get("ownerId")),
        terrain=TerrainType(data.get("terrain", TerrainType.PLAINS.value)),
        neighbors=_as_str_list(data.get("neighbors", [])),
        resources=[TradeResource(r) for r in _as_list(data.get("resources", []))],
        coastal=bool(data.get("coastal", False)),
        garrison=max(0, _as_int(data.get("garrison", config.starting_garrison))),
        development=_as_int(data.get("development", config.starting_development)),
        unrest=max(0, _as_int(data.get("unrest", config.starting_unrest))),
        morale=clamp_stat(_as_float(data.get("morale", config.starting_morale))),
        supply=clamp_stat(_as_float(data.get("supply", config.starting_supply))),
        siege_progress=clamp_stat(_as_float(data.get("siegeProgress", 0))),
    )


def _parse_records(kind: str, raw: Any, ctx: _LoadContext, parse: Callable[[str, Any, _LoadContext], Any]) -> Dict[str, Any]:
    records: Dict[str, Any] = {}
    for key, value in _as_dict(raw).items():
        try:
            records[key] = parse(key, value, ctx)
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            ctx.warn(f'Skipping invalid {kind} entry "{key}": {e}')
    if not records:
        raise ValueError(f"no valid {kind} entries")
    return records


def _default_nations(ctx: _LoadContext) -> Dict[str, Nation]:
    return {
        d.id: build_initial_nation_state(d, ctx.content.config) for d in ctx.content.nations
    }


def _default_territories(ctx: _LoadContext) -> Dict[str, Territory]:
    return {
        d.id: build_initial_territory_state(d, ctx.content.config) for d in ctx.content.territories
    }


def _parse_diplomacy(raw: Any, ctx: _LoadContext) -> DiplomacyState:
    data = _as_dict(raw)
    diplomacy = DiplomacyState()

    def sub(key: str, parse: Callable[[Any], Any], default: Any) -> Any:
        if key not in data:
            ctx.warn(f'Field "diplomacy.{key}" was missing; defaulting to {_describe(default)}.')
            return default
        try:
            return parse(data[key])
        except (KeyError, TypeError, ValueError, OverflowError):
            ctx.warn(f'Field "diplomacy.{key}" was invalid; defaulting to {_describe(default)}.')
            return default

    relations = sub("relations", _as_dict, {})
    diplomacy.relations = {
        str(a): {str(b): int(v) for b, v in row.items() if isinstance(v, (int, float))}
        for a, row in relations.items()
        if isinstance(row, dict)
    }
    diplomacy.wars = set(sub("wars", _as_str_list, []))
    diplomacy.alliances = set(sub("alliances", _as_str_list, []))
    blockades = sub("blockades", _as_dict, {})
    diplomacy.blockades = {
        str(k): max(0.0, min(1.0, float(v)))
        for k, v in blockades.items()
        if isinstance(v, (int, float)) and not isinstance(v, bool) and v > 0
    }
    return diplomacy


def _parse_log(raw: Any, ctx: _LoadContext) -> BoundedLog[LogEntry]:
    return BoundedLog(LOG_CAPACITY, [
        LogEntry(str(e["id"]), _as_int(e["turn"]), str(e["message"]), LogType(e.get("type", "info")))
        for e in _as_list(raw)
        if isinstance(e, dict)
    ])


def _parse_notifications(raw: Any, ctx: _LoadContext) -> BoundedLog[Notification]:
    return BoundedLog(NOTIFICATION_CAPACITY, [
        Notification(str(n["id"]), _as_int(n.get("turn", 0)), str(n["message"]), Tone(n.get("tone", "neutral")))
        for n in _as_list(raw)
        if isinstance(n, dict)
    ])


def _parse_battle_reports(raw: Any, ctx: _LoadContext) -> BoundedLog[CombatResult]:
    return BoundedLog(BATTLE_REPORT_CAPACITY, [
        CombatResult(
            attacker_id=str(r["attackerId"]),
            defender_id=str(r["defenderId"]),
            territory_id=str(r["territoryId"]),
            outcome=CombatOutcome(r["outcome"]),
            attacker_loss=_as_int(r["attackerLoss"]),
            defender_loss=_as_int(r["defenderLoss"]),
            siege_progress=_as_int(r.get("siegeProgress", 0)),
            attacker_supply_penalty=_as_int(r.get("attackerSupplyPenalty", 0)),
            defender_supply_penalty=_as_int(r.get("defenderSupplyPenalty", 0)),
            attacker_power=_as_float(r.get("attackerPower", 0)),
            defender_power=_as_float(r.get("defenderPower", 0)),
            turn=_as_int(r.get("turn", 0)),
        )
        for r in _as_list(raw)
        if isinstance(r, dict)
    ])


def _parse_visibility(raw: Any, ctx: _LoadContext) -> Dict[str, Dict[str, Visibility]]:
    return {
        str(nid): {str(tid): Visibility(level) for tid, level in _as_dict(view).items()}
        for nid, view in _as_dict(raw).items()
    }


def _parse_trade(raw: Any, ctx: _LoadContext) -> TradeState:
    data = _as_dict(raw)
    trade = build_initial_trade_state()
    for key, price in _as_dict(data.get("prices", {})).items():
        trade.prices[TradeResource(key)] = _as_float(price)
    for key, history in _as_dict(data.get("history", {})).items():
        trade.history[TradeResource(key)] = [_as_float(p) for p in _as_list(history)]
    trade.routes = [
        TradeRoute(str(r["id"]), str(r["from"]), str(r["to"]), str(r["mode"]), bool(r.get("blocked", False)))
        for r in _as_list(data.get("routes", []))
        if isinstance(r, dict)
    ]
    return trade


def _parse_replay(raw: Any, ctx: _LoadContext) -> ReplayLog:
    data = _as_dict(raw)
    return ReplayLog(
        seed=_as_int(data.get("seed", 0)),
        entries=[
            ReplayEntry(
                turn=_as_int(e["turn"]),
                action=PlayerAction.from_dict(e["action"]) if e.get("action") else None,
            )
            for e in _as_list(data.get("entries", []))
            if isinstance(e, dict)
        ],
    )


def _simple(coerce: Callable[[Any], Any]) -> Callable[[Any, _LoadContext], Any]:
    return lambda value, ctx: coerce(value)


@dataclass(frozen=True)
class SaveField:
    """One top-level save field: where it goes, how to read it, what to use instead."""

    key: str
    attr: str
    parse: Callable[[Any, _LoadContext], Any]
    default: Callable[[_LoadContext], Any]


SAVE_SCHEMA: Tuple[SaveField, ...] = (
    SaveField("turn", "turn", _simple(_as_int), lambda ctx: 1),
    SaveField("currentPhase", "phase", _simple(_as_phase), lambda ctx: Phase.PLAYER),
    SaveField("playerNationId", "player_nation_id", _simple(_as_str),
              lambda ctx: ctx.content.nations[0].id),
    SaveField("actionsTaken", "actions_taken", _simple(_as_int), lambda ctx: 0),
    SaveField("nations", "nations",
              lambda v, ctx: _parse_records("nation", v, ctx, _parse_nation), _default_nations),
    SaveField("territories", "territories",
              lambda v, ctx: _parse_records("territory", v, ctx, _parse_territory), _default_territories),
    SaveField("diplomacy", "diplomacy", _parse_diplomacy, lambda ctx: DiplomacyState()),
    SaveField("log", "log", _parse_log, lambda ctx: BoundedLog(LOG_CAPACITY)),
    SaveField("notifications", "notifications", _parse_notifications,
              lambda ctx: BoundedLog(NOTIFICATION_CAPACITY)),
    SaveField("battleReports", "battle_reports", _parse_battle_reports,
              lambda ctx: BoundedLog(BATTLE_REPORT_CAPACITY)),
    SaveField("queuedEvents", "queued_events", _simple(_as_str_list), lambda ctx: []),
    SaveField("winner", "winner", _simple(_as_optional_str), lambda ctx: None),
    SaveField("defeated", "defeated", _simple(_as_bool), lambda ctx: False),
    SaveField("visibility", "visibility", _parse_visibility, lambda ctx: {}),
    SaveField("ironman", "ironman", _simple(_as_bool), lambda ctx: False),
    SaveField("trade", "trade", _parse_trade, lambda ctx: _parse_trade({}, ctx)),
    SaveField("replay", "replay", _parse_replay, lambda ctx: ReplayLog(seed=0)),
    SaveField("sequence", "sequence", _simple(_as_int), lambda ctx: 0),
    SaveField("rngState", "rng_state",
              lambda v, ctx: None if v is None else _as_int(v), lambda ctx: None),
)

# Fields a v1 save can legitimately lack; their absence is not reported one by one.
LEGACY_OPTIONAL_FIELDS = {"winner", "rngState"}


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------
def _read_version(raw: Dict[str, Any], ctx: _LoadContext) -> int:
    version = raw.get("saveVersion")
    if version is None:
        return LEGACY_SAVE_VERSION
    if isinstance(version, bool) or not isinstance(version, int):
        ctx.warn(f'Field "saveVersion" was invalid; treating the save as v{LEGACY_SAVE_VERSION}.')
        return LEGACY_SAVE_VERSION
    return version


def migrate_payload(raw: Any, content: Optional[ContentPack] = None) -> MigrationResult:
    """
    Normalise a decoded save payload into a :class:`GameState`.

    Every field in :data:`SAVE_SCHEMA` is read independently; a missing or
    malformed field falls back to its default and adds a warning. Only a
    payload that is not a JSON object at all is rejected.
    """
    if not isinstance(raw, dict):
        raise GameLoadError("Save payload was not a valid object.")

    ctx = _LoadContext(content or DEFAULT_CONTENT)
    version = _read_version(raw, ctx)

    for entry in SAVE_SCHEMA:
        if entry.key not in raw:
            value = entry.default(ctx)
            if entry.key not in LEGACY_OPTIONAL_FIELDS:
                ctx.warn(f'Field "{entry.key}" was missing; defaulting to {_describe(value)}.')
        else:
            try:
                value = entry.parse(raw[entry.key], ctx)
            except (KeyError, TypeError, ValueError, OverflowError):
                value = entry.default(ctx)
                ctx.warn(f'Field "{entry.key}" was invalid; defaulting to {_describe(value)}.')
        ctx.values[entry.attr] = value

    values = ctx.values
    if values["player_nation_id"] not in values["nations"]:
        fallback = next(iter(values["nations"]))
        ctx.warn(
            f'Field "playerNationId" referenced unknown nation '
            f'"{values["player_nation_id"]}"; defaulting to "{fallback}".'
        )
        values["player_nation_id"] = fallback

    orphans = [tid for tid, t in values["territories"].items() if t.owner not in values["nations"]]
    for tid in orphans:
        ctx.warn(f'Skipping territory "{tid}" owned by unknown nation "{values["territories"][tid].owner}".')
        del values["territories"][tid]

    state = GameState(content=ctx.content, **values)
    ensure_relation_matrix(state.diplomacy, state.nations)

    migrated_from: Optional[int] = None
    if version > SAVE_VERSION:
        ctx.warnings.insert(
            0,
            f"Save version v{version} is newer than supported v{SAVE_VERSION}; "
            "attempting best-effort load.",
        )
    elif version < SAVE_VERSION:
        ctx.warnings.insert(
            0,
            f"Loaded legacy save v{version}; applied default values introduced in v{SAVE_VERSION}.",
        )
        migrated_from = version
    return MigrationResult(state=state, warnings=ctx.warnings, migrated_from=migrated_from)


def load_state_from_string(payload: str, content: Optional[ContentPack] = None) -> GameState:
    """
    Decode a save string.

    Raises:
        GameLoadError: if the payload is not valid JSON or not a JSON object.
    """
    try:
        raw = json.loads(payload)
    except (json.JSONDecodeError, TypeError) as e:
        raise GameLoadError(f"Failed to parse save payload: {e}") from e

    result = migrate_payload(raw, content)
    for warning in result.warnings:
        logger.warning("[AncientWar] %s", warning)
    if result.migrated_from is not None:
        logger.info("[AncientWar] Save upgraded from v%d to v%d", result.migrated_from, SAVE_VERSION)
    return result.state


# -----------------------------------------------------------------------------
# Files
# -----------------------------------------------------------------------------
def save_state(state: GameState, file_path: Optional[Path] = None) -> Path:
    """
    Persist the game state to disk in an atomic manner.

    Raises:
        GameSaveError: if writing or renaming fails.
    """
    path = Path(file_path) if file_path is not None else SAVE_FILE
    temp_file = path.with_suffix(".json.tmp")
    data = serialize_state(state)

    try:
        with open(temp_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
    except OSError as e:
        raise GameSaveError(f"Failed to write to temporary save file: {e}") from e

    try:
        shutil.move(str(temp_file), str(path))
    except OSError as e:
        try:
            temp_file.unlink(missing_ok=True)
        except OSError:
            logger.debug("Could not remove temporary save file %s", temp_file)
        raise GameSaveError(f"Failed to rename temporary save file to final: {e}") from e
    logger.info("Game saved to %s", path)
    return path


def load_state(file_path: Optional[Path] = None, content: Optional[ContentPack] = None) -> GameState:
    """
    Load a game state from disk.

    Raises:
        GameLoadError: if the file cannot be read or does not hold a save.
    """
    path = Path(file_path) if file_path is not None else SAVE_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = f.read()
    except OSError as e:
        raise GameLoadError(f"Failed to read save file: {e}") from e
    return load_state_from_string(payload, content)


__all__ = [
    "SAVE_FILE",
    "AUTOSAVE_FILE",
    "GameSaveError",
    "GameLoadError",
    "MigrationResult",
    "SaveField",
    "SAVE_SCHEMA",
    "serialize_state",
    "quick_save_state",
    "migrate_payload",
    "load_state_from_string",
    "save_state",
    "load_state",
]
