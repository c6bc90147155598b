# Settings for the simulation core
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

# Current on-disk save format. Saves without a version field are treated as v1.
SAVE_VERSION = 2
LEGACY_SAVE_VERSION = 1

# Capacities of the push-front logs kept on the game state
LOG_CAPACITY = 100
NOTIFICATION_CAPACITY = 5
BATTLE_REPORT_CAPACITY = 6

# Number of price samples kept per trade resource
PRICE_HISTORY_LENGTH = 12

# Stat meters are always kept inside this range
STAT_MIN = 0
STAT_MAX = 100

# Relation scores between two nations
RELATION_MIN = -100
RELATION_MAX = 100

# Supply thresholds used to derive a territory's supply state
SUPPLIED_THRESHOLD = 70
STRAINED_THRESHOLD = 40

# Combat outcome bands: one side must beat the other by this factor
COMBAT_DECISIVE_RATIO = 1.18

# Victory and defeat thresholds
VICTORY_TERRITORIES = 8
VICTORY_INFLUENCE = 90
VICTORY_STABILITY = 75
DEFEAT_STABILITY = 20

# AI nations only draw at most this many actions per turn
AI_ACTIONS_PER_TURN = 2


@dataclass(frozen=True)
class GameConfig:
    """Tunable numbers read by the engine.

    A single instance is shared by every game created from the same content
    pack. It is never mutated at runtime.
    """

    combat_randomness_range: Tuple[float, float] = (0.85, 1.15)
    max_actions_per_turn: int = 3

    # Action effects
    tech_gain_per_invest: int = 4
    science_gain_per_invest: int = 3
    economy_gain_taxes: int = 6
    crime_gain_taxes: int = 2
    law_gain_pass: int = 4
    stability_gain_pass: int = 3
    spy_effect: int = 4
    spy_crime_increase: int = 3
    diplomacy_effect: int = 6
    war_stability_penalty: int = 4
    army_recruit_strength: int = 4
    army_move_cost: int = 1
    army_move_cap: int = 6

    # Upkeep
    income_per_territory_base: int = 3
    army_upkeep: int = 1
    base_support_decay: int = 1
    base_science_drift: int = 1
    base_crime_growth: int = 3
    crime_decay: int = 2
    stability_decay_per_war: int = 1
    faction_stability_impact: float = 0.1
    faction_economy_impact: float = 0.05
    siege_supply_drain: int = 6
    siege_morale_drain: int = 3
    supply_recovery: int = 5
    morale_recovery: int = 2

    # Zone of control around enemy borders
    zoc_supply_penalty: int = 6
    zoc_morale_penalty: int = 4

    # Events and revolts
    # AI nations only suffer an event when their roll beats this threshold
    ai_event_threshold: float = 0.55
    revolt_threshold: int = 60
    revolt_roll_threshold: float = 0.6

    # Research
    research_per_invest: int = 12
    research_threshold: int = 36

    # Trade
    price_elasticity: float = 0.05
    price_floor: float = 0.5
    price_ceiling: float = 3.0
    tariff_rate: float = 1.0
    blockade_effect: float = 0.4
    route_maintenance: float = 0.5
    import_rate: float = 0.25

    # Starting values
    starting_treasury: int = 20
    starting_garrison: int = 5
    starting_morale: int = 70
    starting_supply: int = 80
    starting_unrest: int = 10
    starting_development: int = 50
