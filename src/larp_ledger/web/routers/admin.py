from __future__ import annotations

from typing import List, Literal

from fastapi import APIRouter, Depends, Response

from larp_ledger.app import LedgerApp
from larp_ledger.errors import InvalidRequestError, NotFoundError
from larp_ledger.mechanics.achievements import RaritySettings
from larp_ledger.models.character import Character
from larp_ledger.models.ledger import CandleTransaction
from larp_ledger.models.reference import Archetype, Culture, Heritage, Skill
from larp_ledger.models.user import Chapter, User
from larp_ledger.storage.repos import ReferenceRepo
from larp_ledger.web.deps import get_ledger, require_admin
from larp_ledger.web.schemas import (
    CandleBalanceOut,
    CandleChangeIn,
    ChapterCreateIn,
    ExperienceAwardIn,
    RaritySettingsIn,
    UserCreateIn,
    ValidationOut,
)

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])

ReferenceKind = Literal["heritage", "culture", "archetype"]
LinkTier = Literal["primary", "secondary"]


# -- Chapters & users --

@router.get("/chapters", response_model=List[Chapter])
def api_list_chapters(ledger: LedgerApp = Depends(get_ledger)) -> List[Chapter]:
    return ledger.chapters.list_chapters()


@router.post("/chapters", response_model=Chapter, status_code=201)
def api_create_chapter(
    body: ChapterCreateIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> Chapter:
    return ledger.chapters.create_chapter(body.name, body.code, admin.id, body.description)


@router.get("/chapters/{chapter_id}/members", response_model=List[User])
def api_chapter_members(chapter_id: str, ledger: LedgerApp = Depends(get_ledger)) -> List[User]:
    return ledger.chapters.chapter_members(chapter_id)


@router.get("/users", response_model=List[User])
def api_list_users(ledger: LedgerApp = Depends(get_ledger)) -> List[User]:
    return ledger.chapters.list_users()


@router.post("/users", response_model=User, status_code=201)
def api_register_user(body: UserCreateIn, ledger: LedgerApp = Depends(get_ledger)) -> User:
    return ledger.chapters.register_user(
        username=body.username,
        player_name=body.player_name,
        email=body.email,
        chapter_id=body.chapter_id,
        is_admin=body.is_admin,
        title=body.title,
    )


# -- Candles --

@router.get("/users/{user_id}/candles", response_model=List[CandleTransaction])
def api_candle_history(user_id: str, ledger: LedgerApp = Depends(get_ledger)) -> List[CandleTransaction]:
    return ledger.candles.history(user_id)


@router.post("/users/{user_id}/candles/award", response_model=CandleBalanceOut)
def api_award_candles(
    user_id: str,
    body: CandleChangeIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> CandleBalanceOut:
    balance = ledger.candles.award(user_id, body.amount, body.reason, admin.id)
    return CandleBalanceOut(user_id=user_id, candles=balance)


@router.post("/users/{user_id}/candles/spend", response_model=CandleBalanceOut)
def api_spend_candles(
    user_id: str,
    body: CandleChangeIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> CandleBalanceOut:
    balance = ledger.candles.spend(user_id, body.amount, body.reason, admin.id)
    return CandleBalanceOut(user_id=user_id, candles=balance)


# -- Experience --

@router.post("/experience", response_model=List[Character])
def api_award_experience(
    body: ExperienceAwardIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> List[Character]:
    return ledger.characters.award_experience_bulk(
        body.character_ids, body.amount, body.reason, admin.id,
    )


@router.post("/characters/{character_id}/refresh", response_model=Character)
def api_refresh_totals(character_id: str, ledger: LedgerApp = Depends(get_ledger)) -> Character:
    return ledger.characters.refresh_totals(character_id)


# -- Achievement settings --

@router.get("/achievement-settings", response_model=RaritySettings)
def api_get_rarity(ledger: LedgerApp = Depends(get_ledger)) -> RaritySettings:
    return ledger.achievements.get()


@router.put("/achievement-settings", response_model=RaritySettings)
def api_update_rarity(
    body: RaritySettingsIn,
    admin: User = Depends(require_admin),
    ledger: LedgerApp = Depends(get_ledger),
) -> RaritySettings:
    return ledger.achievements.update(body.model_dump(exclude_none=True), admin.id)


# -- Reference data --

def _reference_repo(ledger: LedgerApp) -> ReferenceRepo:
    return ReferenceRepo(ledger.db)


@router.get("/reference/validate", response_model=ValidationOut)
def api_validate_reference(ledger: LedgerApp = Depends(get_ledger)) -> ValidationOut:
    problems = ledger.reference.validate()
    return ValidationOut(ok=not problems, problems=problems)


@router.put("/reference/skills/{skill_id}", response_model=Skill)
def api_put_skill(skill_id: str, body: Skill, ledger: LedgerApp = Depends(get_ledger)) -> Skill:
    skill = body.model_copy(update={"id": skill_id})
    _reference_repo(ledger).upsert_skill(skill)
    ledger.reload_reference()
    return skill


@router.put("/reference/heritages/{heritage_id}", response_model=Heritage)
def api_put_heritage(heritage_id: str, body: Heritage, ledger: LedgerApp = Depends(get_ledger)) -> Heritage:
    heritage = body.model_copy(update={"id": heritage_id})
    _reference_repo(ledger).upsert_heritage(heritage)
    ledger.reload_reference()
    return ledger.reference.heritage(heritage_id)


@router.put("/reference/cultures/{culture_id}", response_model=Culture)
def api_put_culture(culture_id: str, body: Culture, ledger: LedgerApp = Depends(get_ledger)) -> Culture:
    culture = body.model_copy(update={"id": culture_id})
    _reference_repo(ledger).upsert_culture(culture)
    ledger.reload_reference()
    return ledger.reference.culture(culture_id)


@router.put("/reference/archetypes/{archetype_id}", response_model=Archetype)
def api_put_archetype(archetype_id: str, body: Archetype, ledger: LedgerApp = Depends(get_ledger)) -> Archetype:
    archetype = body.model_copy(update={"id": archetype_id})
    _reference_repo(ledger).upsert_archetype(archetype)
    ledger.reload_reference()
    return ledger.reference.archetype(archetype_id)


@router.delete("/reference/{table}/{item_id}", status_code=204)
def api_delete_reference(
    table: Literal["skills", "heritages", "cultures", "archetypes"],
    item_id: str,
    ledger: LedgerApp = Depends(get_ledger),
) -> Response:
    repo = _reference_repo(ledger)
    deleted = {
        "skills": repo.delete_skill,
        "heritages": repo.delete_heritage,
        "cultures": repo.delete_culture,
        "archetypes": repo.delete_archetype,
    }[table](item_id)
    if not deleted:
        raise NotFoundError(f"{table[:-1].title()} {item_id} not found.")
    ledger.reload_reference()
    return Response(status_code=204)


@router.put("/reference/{kind}/{owner_id}/skills/{tier}/{skill_id}", status_code=204)
def api_add_skill_link(
    kind: ReferenceKind, owner_id: str, tier: LinkTier, skill_id: str,
    ledger: LedgerApp = Depends(get_ledger),
) -> Response:
    try:
        _reference_repo(ledger).add_link(kind, owner_id, skill_id, tier)
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from exc
    ledger.reload_reference()
    return Response(status_code=204)


@router.delete("/reference/{kind}/{owner_id}/skills/{tier}/{skill_id}", status_code=204)
def api_remove_skill_link(
    kind: ReferenceKind, owner_id: str, tier: LinkTier, skill_id: str,
    ledger: LedgerApp = Depends(get_ledger),
) -> Response:
    try:
        removed = _reference_repo(ledger).remove_link(kind, owner_id, skill_id, tier)
    except ValueError as exc:
        raise InvalidRequestError(str(exc)) from exc
    if not removed:
        raise NotFoundError(f"{skill_id} is not a {tier} skill of {owner_id}.")
    ledger.reload_reference()
    return Response(status_code=204)
