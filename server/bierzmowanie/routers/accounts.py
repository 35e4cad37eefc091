from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from bierzmowanie.auth import capabilities
from bierzmowanie.auth.deps import authorize
from bierzmowanie.auth.tokens import TokenClaims
from bierzmowanie.core.db import get_db
from bierzmowanie.models.account import Account
from bierzmowanie.schemas.account import (
    AccountCreate,
    AccountOut,
    AccountResponse,
    AccountUpdate,
    AnimatorGroupsIn,
    CandidateLinkIn,
)
from bierzmowanie.schemas.auth import MessageResponse
from bierzmowanie.schemas.common import MutationResponse, SavedRecord
from bierzmowanie.services import account_updates
from bierzmowanie.services import accounts as account_service

router = APIRouter(prefix="/accounts", tags=["accounts"])


def _serialize_account(account: Account) -> AccountOut:
    return AccountOut(
        id=account.id,
        username=account.username,
        imie=account.first_name,
        nazwisko=account.last_name,
        roles=account.role_names,
    )


@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.ACCOUNT_CREATE)),
) -> AccountResponse:
    account = account_service.create_account(db, payload)
    return AccountResponse(message="Account created", data=_serialize_account(account))


@router.put("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: int,
    payload: AccountUpdate,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.ACCOUNT_UPDATE)),
) -> AccountResponse:
    account = account_updates.update_account(db, account_id, payload)
    return AccountResponse(message="Account updated", data=_serialize_account(account))


@router.delete("/{account_id}", response_model=MessageResponse)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.ACCOUNT_DELETE)),
) -> MessageResponse:
    account_service.soft_delete_account(db, account_id)
    return MessageResponse(message="Account deleted")


@router.post("/{account_id}/candidates", response_model=MutationResponse)
def link_candidates(
    account_id: int,
    payload: CandidateLinkIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.ACCOUNT_CHILDREN_LINK)),
) -> MutationResponse:
    parent = account_service.link_parent_candidates(db, account_id, payload.kandydat_ids)
    return MutationResponse(
        message="Candidates linked to parent",
        data=SavedRecord(id=parent.id, user_id=parent.account_id),
    )


@router.post("/{account_id}/groups", response_model=MessageResponse)
def assign_groups(
    account_id: int,
    payload: AnimatorGroupsIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.ACCOUNT_GROUPS_ASSIGN)),
) -> MessageResponse:
    account_service.assign_animator_groups(db, account_id, payload.grupy_ids)
    return MessageResponse(message="Groups assigned to animator")
