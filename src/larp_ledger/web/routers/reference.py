from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from larp_ledger.app import LedgerApp
from larp_ledger.errors import NotFoundError
from larp_ledger.mechanics.skills import classify_skill
from larp_ledger.models.reference import Archetype, Culture, Heritage, Skill
from larp_ledger.web.deps import get_ledger
from larp_ledger.web.schemas import SkillPriceOut

router = APIRouter(tags=["reference"])


@router.get("/skills", response_model=List[Skill])
def api_list_skills(ledger: LedgerApp = Depends(get_ledger)) -> List[Skill]:
    return sorted(ledger.reference.skills.values(), key=lambda s: s.name)


@router.get("/skills/{skill_id}/price", response_model=SkillPriceOut)
def api_skill_price(
    skill_id: str,
    heritage_id: Optional[str] = Query(None),
    archetype_id: Optional[str] = Query(None),
    second_archetype_id: Optional[str] = Query(None),
    ledger: LedgerApp = Depends(get_ledger),
) -> SkillPriceOut:
    ref = ledger.reference
    price = classify_skill(
        skill_id,
        ref.heritage(heritage_id) if heritage_id else None,
        ref.archetype(archetype_id),
        ref.archetype(second_archetype_id),
    )
    return SkillPriceOut(skill_id=price.skill_id, tier=price.tier.value, cost=price.cost)


@router.get("/heritages", response_model=List[Heritage])
def api_list_heritages(ledger: LedgerApp = Depends(get_ledger)) -> List[Heritage]:
    return sorted(ledger.reference.heritages.values(), key=lambda h: h.name)


@router.get("/heritages/{heritage_id}/cultures", response_model=List[Culture])
def api_heritage_cultures(heritage_id: str, ledger: LedgerApp = Depends(get_ledger)) -> List[Culture]:
    if ledger.reference.heritage(heritage_id) is None:
        raise NotFoundError(f"Heritage {heritage_id} not found.")
    return ledger.reference.cultures_for(heritage_id)


@router.get("/cultures", response_model=List[Culture])
def api_list_cultures(ledger: LedgerApp = Depends(get_ledger)) -> List[Culture]:
    return sorted(ledger.reference.cultures.values(), key=lambda c: c.name)


@router.get("/archetypes", response_model=List[Archetype])
def api_list_archetypes(ledger: LedgerApp = Depends(get_ledger)) -> List[Archetype]:
    return sorted(ledger.reference.archetypes.values(), key=lambda a: a.name)
