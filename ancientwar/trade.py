from __future__ import annotations

"""Trade routes, market prices and per-nation trade income."""

import logging
from typing import Dict, List

from atlas.resource_types import BASE_PRICES, TradeResource
from atlas.terrain import NAVIGABLE_TERRAIN

from .diplomacy import is_at_war, strongest_blockade
from .mechanics import TradeContext, calculate_trade_price, clamp, round_half_up
from .models import (
    EconomySummary,
    GameState,
    Nation,
    StatKey,
    Territory,
    TradeRoute,
    TradeState,
    adjust_treasury,
    controlled_territories,
)
from .settings import GameConfig, PRICE_HISTORY_LENGTH

logger = logging.getLogger("ancientwar.trade")


def build_initial_trade_state() -> TradeState:
    return TradeState(
        prices={resource: BASE_PRICES[resource] for resource in TradeResource},
        history={resource: [] for resource in TradeResource},
        routes=[],
    )


def _is_sea_edge(a: Territory, b: Territory) -> bool:
    return a.terrain in NAVIGABLE_TERRAIN or b.terrain in NAVIGABLE_TERRAIN


def recompute_trade_routes(state: GameState) -> List[TradeRoute]:
    """One route per adjacent pair of territories.

    Sea routes between two nations at war are blocked.
    """
    routes: List[TradeRoute] = []
    seen = set()
    for territory in state.territories.values():
        for neighbor_id in territory.neighbors:
            neighbor = state.territories.get(neighbor_id)
            if neighbor is None:
                continue
            key = "|".join(sorted((territory.id, neighbor.id)))
            if key in seen:
                continue
            seen.add(key)
            mode = "sea" if _is_sea_edge(territory, neighbor) else "land"
            blocked = (
                mode == "sea"
                and territory.owner != neighbor.owner
                and is_at_war(state.diplomacy, territory.owner, neighbor.owner)
            )
            routes.append(TradeRoute(key, territory.id, neighbor.id, mode, blocked))
    return routes


def resource_supply(state: GameState) -> Dict[TradeResource, int]:
    totals = {resource: 0 for resource in TradeResource}
    for territory in state.territories.values():
        for resource in territory.resources:
            totals[resource] += 1
    return totals


def update_trade_prices(state: GameState, config: GameConfig) -> None:
    """Move every price toward scarcity: more demand than supply pushes it up."""
    supply = resource_supply(state)
    demand = len(state.nations) * 2
    for resource in TradeResource:
        previous = state.trade.prices.get(resource, 1.0)
        delta = (demand - supply[resource]) * config.price_elasticity
        price = round(clamp(previous + delta, config.price_floor, config.price_ceiling), 2)
        state.trade.prices[resource] = price
        history = state.trade.history.get(resource, [])
        state.trade.history[resource] = (history + [price])[-PRICE_HISTORY_LENGTH:]


def _touches(route: TradeRoute, state: GameState, nation_id: str) -> bool:
    return (
        state.territories[route.from_id].owner == nation_id
        or state.territories[route.to_id].owner == nation_id
    )


def _scarcity(supply: Dict[TradeResource, int], resource: TradeResource, demand: int) -> float:
    if demand <= 0:
        return 0.0
    return clamp((demand - supply[resource]) / demand, 0, 1)


def compute_nation_trade(state: GameState, nation: Nation, config: GameConfig) -> EconomySummary:
    owned = controlled_territories(state, nation.id)
    routes = [r for r in state.trade.routes if _touches(r, state, nation.id)]
    blocked = sum(1 for r in routes if r.blocked)
    smuggling = round(clamp(nation.stat(StatKey.CRIME) / 200, 0, 0.4), 2)
    blockade = strongest_blockade(state.diplomacy, nation.id)

    income = sum(
        state.trade.prices.get(resource, 1.0) * config.tariff_rate
        for territory in owned
        for resource in territory.resources
    )
    if blocked:
        income *= 1 - config.blockade_effect * (1 - smuggling)
    if blockade:
        income *= 1 - config.blockade_effect * blockade
    income = max(0.0, income)

    domestic = sum(
        1
        for r in routes
        if state.territories[r.from_id].owner == nation.id
        and state.territories[r.to_id].owner == nation.id
    )
    maintenance = domestic * config.route_maintenance

    produced = {resource for territory in owned for resource in territory.resources}
    supply = resource_supply(state)
    demand = len(state.nations) * 2
    imports = 0.0
    for resource in TradeResource:
        if resource in produced:
            continue
        context = TradeContext(
            influence=nation.stat(StatKey.INFLUENCE),
            blockade=blockade,
            tech_level=nation.stat(StatKey.TECH),
            scarcity=_scarcity(supply, resource, demand),
        )
        imports += calculate_trade_price(state.trade.prices.get(resource, 1.0), context) * config.import_rate

    return EconomySummary(
        trade_income=round(income, 2),
        maintenance=round(maintenance, 2),
        import_costs=round(imports, 2),
        smuggling=smuggling,
        blocked_routes=blocked,
    )


def apply_trade_economy(state: GameState, config: GameConfig) -> None:
    """Refresh routes and prices, then settle trade income for every nation."""
    state.trade.routes = recompute_trade_routes(state)
    update_trade_prices(state, config)
    for nation in state.nations.values():
        summary = compute_nation_trade(state, nation, config)
        before = nation.treasury
        adjust_treasury(nation, round_half_up(summary.trade_income))
        adjust_treasury(nation, -round_half_up(summary.maintenance + summary.import_costs))
        summary.net = nation.treasury - before
        nation.economy = summary
    logger.debug("Trade settled for turn %d", state.turn)


__all__ = [
    "build_initial_trade_state",
    "recompute_trade_routes",
    "resource_supply",
    "update_trade_prices",
    "compute_nation_trade",
    "apply_trade_economy",
]
