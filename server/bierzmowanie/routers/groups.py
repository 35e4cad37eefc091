from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bierzmowanie.auth import capabilities
from bierzmowanie.auth.deps import authorize
from bierzmowanie.auth.tokens import TokenClaims
from bierzmowanie.core.db import get_db
from bierzmowanie.schemas.account import CandidateLinkIn
from bierzmowanie.schemas.auth import MessageResponse
from bierzmowanie.services import groups as group_service

router = APIRouter(prefix="/groups", tags=["groups"])


@router.put("/{group_id}/members", response_model=MessageResponse)
def replace_members(
    group_id: int,
    payload: CandidateLinkIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.GROUP_MEMBERS_REPLACE)),
) -> MessageResponse:
    group_service.replace_group_members(db, group_id, payload.kandydat_ids)
    return MessageResponse(message="Group members updated")
