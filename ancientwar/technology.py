from __future__ import annotations

"""Technology research for each nation."""

import logging
from typing import List, Optional

from .data import ContentPack, TechNode
from .mechanics import can_research_tech
from .models import Nation, update_stat

logger = logging.getLogger("ancientwar.technology")


def available_techs(nation: Nation, content: ContentPack) -> List[str]:
    """Techs the nation could focus on right now, in tree order."""
    tree = content.tech_tree
    return [
        node.id
        for node in content.techs
        if can_research_tech(node.id, nation.tech.researched, tree)
    ]


def set_tech_focus(nation: Nation, tech_id: Optional[str], content: ContentPack) -> bool:
    """Point research at ``tech_id``; ``None`` clears the focus."""
    if tech_id is None:
        nation.tech.focus = None
        return True
    if not can_research_tech(tech_id, nation.tech.researched, content.tech_tree):
        return False
    nation.tech.focus = tech_id
    nation.tech.progress.setdefault(tech_id, 0)
    return True


def _complete(nation: Nation, node: TechNode) -> None:
    nation.tech.researched.append(node.id)
    nation.tech.progress.pop(node.id, None)
    nation.tech.focus = None
    for key, amount in node.bonuses.items():
        update_stat(nation, key, amount)
    logger.info("%s completed research of %s", nation.name, node.name)


def advance_research(
    nation: Nation,
    points: int,
    content: ContentPack,
    auto_focus: bool = False,
) -> Optional[str]:
    """
    Add research points to the nation's current focus.

    When ``auto_focus`` is set and nothing is being researched, the first
    available tech in tree order is picked. Returns the id of a tech
    completed by this call, if any.
    """
    tech = nation.tech
    if tech.focus is None and auto_focus:
        candidates = available_techs(nation, content)
        if candidates:
            set_tech_focus(nation, candidates[0], content)
    if tech.focus is None:
        return None

    node = content.tech(tech.focus)
    if node is None:
        tech.focus = None
        return None
    tech.progress[node.id] = tech.progress.get(node.id, 0) + points
    if tech.progress[node.id] >= content.config.research_threshold:
        _complete(nation, node)
        return node.id
    return None


def has_tech(nation: Nation, tech_id: str) -> bool:
    return tech_id in nation.tech.researched


__all__ = ["available_techs", "set_tech_focus", "advance_research", "has_tech"]
