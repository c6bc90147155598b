# coding: utf-8
from __future__ import annotations

"""Terrain types and the combat and movement tables keyed on them."""

from enum import Enum
from typing import Dict, Set


class TerrainType(Enum):
    PLAINS = "plains"
    HILLS = "hills"
    MOUNTAIN = "mountain"
    RIVER = "river"
    COASTAL = "coastal"
    STEPPE = "steppe"
    DESERT = "desert"


# Multiplier applied to both sides of a battle fought on the terrain.
TERRAIN_MODIFIERS: Dict[TerrainType, float] = {
    TerrainType.PLAINS: 1.0,
    TerrainType.HILLS: 1.05,
    TerrainType.MOUNTAIN: 1.1,
    TerrainType.RIVER: 1.08,
    TerrainType.COASTAL: 0.95,
    TerrainType.STEPPE: 1.0,
    TerrainType.DESERT: 0.9,
}

# Garrison points spent to march into a territory, per unit of base move cost.
MOVEMENT_COST: Dict[TerrainType, int] = {
    TerrainType.PLAINS: 1,
    TerrainType.STEPPE: 1,
    TerrainType.COASTAL: 1,
    TerrainType.RIVER: 2,
    TerrainType.HILLS: 2,
    TerrainType.DESERT: 2,
    TerrainType.MOUNTAIN: 3,
}

# Terrain that can host sea trade routes.
NAVIGABLE_TERRAIN: Set[TerrainType] = {TerrainType.COASTAL, TerrainType.RIVER}


def terrain_modifier(terrain: TerrainType) -> float:
    return TERRAIN_MODIFIERS.get(terrain, 1.0)


def movement_cost(terrain: TerrainType, base_cost: int = 1) -> int:
    return base_cost * MOVEMENT_COST.get(terrain, 1)


__all__ = [
    "TerrainType",
    "TERRAIN_MODIFIERS",
    "MOVEMENT_COST",
    "NAVIGABLE_TERRAIN",
    "terrain_modifier",
    "movement_cost",
]
