import os
import sys
sys.path.append(os.path.join(os.path.dirname(__file__), ".."))

import pytest

from ancientwar.diplomacy import relation_key, set_blockade
from ancientwar.game import create_initial_game_state
from ancientwar.settings import PRICE_HISTORY_LENGTH
from ancientwar.trade import apply_trade_economy, recompute_trade_routes
from atlas.resource_types import TradeResource


@pytest.fixture
def state():
    state = create_initial_game_state("rome", 42)
    for territory in state.territories.values():
        if not territory.resources:
            territory.resources = [TradeResource.GRAIN]
    return state


def test_prices_stay_within_bounds(state):
    config = state.content.config
    for index, territory in enumerate(state.territories.values()):
        territory.resources = [TradeResource.GRAIN] if index % 2 == 0 else [TradeResource.COPPER]

    for _ in range(30):
        apply_trade_economy(state, config)

    for resource in TradeResource:
        assert config.price_floor <= state.trade.prices[resource] <= config.price_ceiling
        assert len(state.trade.history[resource]) <= PRICE_HISTORY_LENGTH


def test_war_blocks_sea_routes_and_cuts_income(state):
    config = state.content.config
    rome = state.player
    routes = recompute_trade_routes(state)
    assert not any(r.mode == "sea" and r.blocked for r in routes)

    # Let prices settle so only the war moves income
    for _ in range(5):
        apply_trade_economy(state, config)
    baseline = rome.economy.trade_income
    assert baseline > 0

    state.diplomacy.wars.add(relation_key("rome", "carthage"))
    apply_trade_economy(state, config)
    assert rome.economy.trade_income < baseline
    assert rome.economy.blocked_routes > 0


def test_blockade_cuts_income(state):
    config = state.content.config
    egypt = state.nations["egypt"]
    for _ in range(5):
        apply_trade_economy(state, config)
    baseline = egypt.economy.trade_income

    set_blockade(state.diplomacy, "egypt", "minoa", 0.5)
    apply_trade_economy(state, config)
    assert egypt.economy.trade_income < baseline


def test_route_modes(state):
    routes = {r.id: r for r in recompute_trade_routes(state)}
    assert routes["carthage_carthage|rome_campania"].mode == "sea"
    assert routes["rome_etruria|rome_latium"].mode == "land"


def test_one_route_per_border(state):
    routes = recompute_trade_routes(state)
    edges = {
        "|".join(sorted((t.id, n)))
        for t in state.territories.values()
        for n in t.neighbors
    }
    assert len(routes) == len(edges)
    assert len({r.id for r in routes}) == len(routes)


def test_net_matches_treasury_change(state):
    rome = state.player
    before = rome.treasury
    apply_trade_economy(state, state.content.config)
    assert rome.economy.net == rome.treasury - before
