# coding: utf-8
from __future__ import annotations

"""Trade resources and their opening prices."""

from enum import Enum
from typing import Dict


class TradeResource(Enum):
    """Goods produced by territories and traded between nations."""

    GRAIN = "grain"
    TIMBER = "timber"
    COPPER = "copper"
    TIN = "tin"
    HORSES = "horses"
    PAPYRUS = "papyrus"


# Opening market price of every resource.
BASE_PRICES: Dict[TradeResource, float] = {
    TradeResource.GRAIN: 1.0,
    TradeResource.TIMBER: 1.2,
    TradeResource.COPPER: 1.6,
    TradeResource.TIN: 1.8,
    TradeResource.HORSES: 1.5,
    TradeResource.PAPYRUS: 1.4,
}

__all__ = [
    "TradeResource",
    "BASE_PRICES",
]
