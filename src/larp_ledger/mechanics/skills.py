"""Skill pricing and prerequisites: pure logic, no I/O."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from larp_ledger.models.reference import Archetype, Heritage, Skill

PRIMARY_SKILL_COST = 5
SECONDARY_SKILL_COST = 10
OTHER_SKILL_COST = 20


class SkillTier(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    OTHER = "other"


TIER_COSTS: dict[SkillTier, int] = {
    SkillTier.PRIMARY: PRIMARY_SKILL_COST,
    SkillTier.SECONDARY: SECONDARY_SKILL_COST,
    SkillTier.OTHER: OTHER_SKILL_COST,
}


@dataclass(frozen=True)
class SkillPrice:
    skill_id: str
    tier: SkillTier
    cost: int


def classify_skill(
    skill_id: str,
    heritage: Optional[Heritage],
    primary_archetype: Optional[Archetype],
    secondary_archetype: Optional[Archetype] = None,
) -> SkillPrice:
    """Price a skill for a heritage and one or two archetypes.

    First match wins:
      1. primary skill of either archetype -> primary (5 XP)
      2. heritage secondary skill, or secondary skill of either archetype -> secondary (10 XP)
      3. anything else, including ids missing from the reference data -> other (20 XP)
    """
    archetypes = [a for a in (primary_archetype, secondary_archetype) if a is not None]

    if any(skill_id in a.primary_skills for a in archetypes):
        tier = SkillTier.PRIMARY
    elif (heritage is not None and skill_id in heritage.secondary_skills) or any(
        skill_id in a.secondary_skills for a in archetypes
    ):
        tier = SkillTier.SECONDARY
    else:
        tier = SkillTier.OTHER
    return SkillPrice(skill_id=skill_id, tier=tier, cost=TIER_COSTS[tier])


def prerequisite_met(skill: Optional[Skill], learned_skill_ids: Iterable[str]) -> tuple[bool, str]:
    """Check whether a skill's prerequisite is already learned.

    Returns:
        (met, reason)
    """
    if skill is None or not skill.prerequisite_id:
        return True, ""
    if skill.prerequisite_id in set(learned_skill_ids):
        return True, ""
    return False, f"{skill.name} requires {skill.prerequisite_id} to be learned first."


def order_by_prerequisites(skill_ids: list[str], skills: dict[str, Skill]) -> tuple[list[str], list[str]]:
    """Order a batch of purchases so prerequisites come first.

    Returns:
        (ordered, unsatisfiable) where unsatisfiable skills have a prerequisite
        that is neither already in the batch nor resolvable.
    """
    remaining = list(dict.fromkeys(skill_ids))
    ordered: list[str] = []
    progress = True
    while remaining and progress:
        progress = False
        for sid in list(remaining):
            ok, _ = prerequisite_met(skills.get(sid), ordered)
            if ok:
                ordered.append(sid)
                remaining.remove(sid)
                progress = True
    return ordered, remaining


def find_prerequisite_cycles(skills: Iterable[Skill]) -> list[list[str]]:
    """Find every prerequisite cycle in the skill table.

    Each skill has at most one prerequisite, so following the chain from any
    skill either terminates or revisits a skill already on the current path.
    """
    by_id = {s.id: s for s in skills}
    cycles: list[list[str]] = []
    done: set[str] = set()
    for start in by_id:
        path: list[str] = []
        on_path: set[str] = set()
        current: Optional[str] = start
        while current is not None and current in by_id and current not in done:
            if current in on_path:
                cycle = path[path.index(current):] + [current]
                cycles.append(cycle)
                break
            path.append(current)
            on_path.add(current)
            current = by_id[current].prerequisite_id
        done.update(path)
    return cycles
