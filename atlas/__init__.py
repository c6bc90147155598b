"""Map data for the simulation: terrain, resources, territories and fog of war."""

from .terrain import TerrainType, TERRAIN_MODIFIERS, MOVEMENT_COST, terrain_modifier, movement_cost
from .resource_types import TradeResource, BASE_PRICES
from .territories import TerritoryDefinition, TERRITORY_DEFINITIONS, are_adjacent
from .visibility import Visibility, compute_visibility, refresh_visibility

__all__ = [
    "TerrainType",
    "TERRAIN_MODIFIERS",
    "MOVEMENT_COST",
    "terrain_modifier",
    "movement_cost",
    "TradeResource",
    "BASE_PRICES",
    "TerritoryDefinition",
    "TERRITORY_DEFINITIONS",
    "are_adjacent",
    "Visibility",
    "compute_visibility",
    "refresh_visibility",
]
