from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, Response

from larp_ledger.app import LedgerApp
from larp_ledger.errors import PermissionDeniedError
from larp_ledger.models.character import Character, CharacterQuote
from larp_ledger.models.ledger import ExperienceEntry
from larp_ledger.models.user import User
from larp_ledger.web.deps import current_user, get_ledger, require_admin
from larp_ledger.web.schemas import (
    ActiveIn,
    ArchetypePurchaseIn,
    AttributePurchaseIn,
    CharacterCreateIn,
    RetireIn,
    SkillPurchaseIn,
)

router = APIRouter(tags=["characters"])


def _owned(ledger: LedgerApp, character_id: str, user: User) -> Character:
    character = ledger.characters.get(character_id)
    if character.user_id != user.id and not user.is_admin:
        raise PermissionDeniedError("That character belongs to another player.")
    return character


@router.post("", response_model=Character, status_code=201)
def api_create_character(
    body: CharacterCreateIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    return ledger.characters.create_character(
        user_id=user.id,
        name=body.name,
        heritage_id=body.heritage_id,
        culture_id=body.culture_id,
        archetype_id=body.archetype_id,
        body=body.body,
        stamina=body.stamina,
        skill_ids=body.skill_ids,
    )


@router.get("", response_model=List[Character])
def api_list_characters(
    all_players: bool = Query(False, alias="all", description="admins only: every player's characters"),
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> List[Character]:
    if all_players and user.is_admin:
        return ledger.characters.list_all()
    return ledger.characters.list_for_user(user.id)


@router.get("/{character_id}", response_model=Character)
def api_get_character(
    character_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    return _owned(ledger, character_id, user)


@router.delete("/{character_id}", status_code=204)
def api_delete_character(
    character_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> Response:
    ledger.characters.delete_character(character_id, requested_by=user.id)
    return Response(status_code=204)


@router.get("/{character_id}/quote", response_model=CharacterQuote)
def api_quote(
    character_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> CharacterQuote:
    _owned(ledger, character_id, user)
    return ledger.characters.quote(character_id)


@router.post("/{character_id}/skills", response_model=Character)
def api_purchase_skill(
    character_id: str,
    body: SkillPurchaseIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    _owned(ledger, character_id, user)
    return ledger.characters.purchase_skill(character_id, body.skill_id, purchased_by=user.id)


@router.delete("/{character_id}/skills/{skill_id}", response_model=Character)
def api_remove_skill(
    character_id: str,
    skill_id: str,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    return ledger.characters.remove_skill(character_id, skill_id, removed_by=admin.id)


@router.post("/{character_id}/attributes", response_model=Character)
def api_increase_attribute(
    character_id: str,
    body: AttributePurchaseIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    _owned(ledger, character_id, user)
    return ledger.characters.increase_attribute(
        character_id, body.attribute, body.points, purchased_by=user.id,
    )


@router.post("/{character_id}/archetype", response_model=Character)
def api_second_archetype(
    character_id: str,
    body: ArchetypePurchaseIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    _owned(ledger, character_id, user)
    return ledger.characters.purchase_second_archetype(
        character_id, body.archetype_id, purchased_by=user.id,
    )


@router.get("/{character_id}/experience", response_model=List[ExperienceEntry])
def api_experience(
    character_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> List[ExperienceEntry]:
    _owned(ledger, character_id, user)
    return ledger.characters.experience_history(character_id)


@router.get("/{character_id}/attendance-xp", response_model=List[ExperienceEntry])
def api_attendance(
    character_id: str, user: User = Depends(current_user), ledger: LedgerApp = Depends(get_ledger),
) -> List[ExperienceEntry]:
    _owned(ledger, character_id, user)
    return ledger.characters.attendance_history(character_id)


@router.post("/{character_id}/retire", response_model=Character)
def api_retire(
    character_id: str,
    body: RetireIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    _owned(ledger, character_id, user)
    return ledger.characters.retire(character_id, body.reason, retired_by=user.id)


@router.post("/{character_id}/active", response_model=Character)
def api_set_active(
    character_id: str,
    body: ActiveIn,
    user: User = Depends(current_user),
    ledger: LedgerApp = Depends(get_ledger),
) -> Character:
    _owned(ledger, character_id, user)
    return ledger.characters.set_active(character_id, body.active)
