from __future__ import annotations

"""Mission chain for the human player."""

import logging
from typing import List

from .data import ContentPack, MissionDefinition, MissionObjective, MissionReward
from .models import (
    GameState,
    Nation,
    Tone,
    adjust_treasury,
    controlled_territories,
    push_notification,
    update_stat,
)
from .technology import has_tech

logger = logging.getLogger("ancientwar.missions")


def _eligible(definition: MissionDefinition, nation: Nation) -> bool:
    return all(m in nation.missions.completed for m in definition.prerequisites)


def start_missions(nation: Nation, content: ContentPack) -> List[str]:
    """Activate every mission without prerequisites."""
    for definition in content.missions:
        if not definition.prerequisites and definition.id not in nation.missions.active:
            nation.missions.active.append(definition.id)
    return nation.missions.active


def objective_met(state: GameState, nation: Nation, objective: MissionObjective) -> bool:
    if objective.type == "control_territories":
        return len(controlled_territories(state, nation.id)) >= int(objective.value)
    if objective.type == "stat_threshold":
        return objective.stat is not None and nation.stat(objective.stat) >= int(objective.value)
    if objective.type == "tech_researched":
        techs = objective.value if isinstance(objective.value, (list, tuple)) else [objective.value]
        return all(has_tech(nation, t) for t in techs)
    logger.warning("Unknown mission objective type %r", objective.type)
    return False


def grant_reward(nation: Nation, reward: MissionReward) -> None:
    if reward.type == "stat" and reward.stat is not None:
        update_stat(nation, reward.stat, reward.amount)
    elif reward.type == "treasury":
        adjust_treasury(nation, reward.amount)


def evaluate_missions(state: GameState) -> List[str]:
    """
    Complete every active player mission whose objectives all hold, grant
    its rewards, then unlock the missions whose prerequisites are now done.

    Returns the ids of the missions completed by this call.
    """
    content = state.content
    nation = state.player
    progress = nation.missions
    completed: List[str] = []

    for mission_id in list(progress.active):
        definition = content.mission(mission_id)
        if definition is None:
            continue
        if all(objective_met(state, nation, o) for o in definition.objectives):
            progress.active.remove(mission_id)
            progress.completed.append(mission_id)
            completed.append(mission_id)
            for reward in definition.rewards:
                grant_reward(nation, reward)
            push_notification(state, f"Mission completed: {definition.name}", Tone.POSITIVE)

    for definition in content.missions:
        if definition.id in progress.completed or definition.id in progress.active:
            continue
        if _eligible(definition, nation):
            progress.active.append(definition.id)
            push_notification(state, f"New mission available: {definition.name}", Tone.NEUTRAL)
    return completed


__all__ = ["start_missions", "objective_met", "grant_reward", "evaluate_missions"]
