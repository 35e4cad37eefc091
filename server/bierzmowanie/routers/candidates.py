from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bierzmowanie.auth import capabilities
from bierzmowanie.auth.deps import authorize
from bierzmowanie.auth.tokens import TokenClaims
from bierzmowanie.core.db import get_db
from bierzmowanie.schemas.candidate import (
    CandidateProfileResponse,
    ConfirmationNameIn,
    GroupAssignIn,
    ParentIn,
    ParishAssignIn,
    SchoolEnrollmentIn,
    WitnessIn,
)
from bierzmowanie.schemas.common import MutationResponse
from bierzmowanie.services import candidate_reader
from bierzmowanie.services import candidates as candidate_service

router = APIRouter(prefix="/candidate", tags=["candidates"])


@router.get("/{account_id}", response_model=CandidateProfileResponse)
def get_candidate(
    account_id: int,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.CANDIDATE_READ)),
) -> CandidateProfileResponse:
    return CandidateProfileResponse(data=candidate_reader.get_candidate_profile(db, account_id))


@router.post("/{account_id}/parent", response_model=MutationResponse)
def save_parent(
    account_id: int,
    payload: ParentIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.PARENT_SAVE)),
) -> MutationResponse:
    result = candidate_service.save_parent(db, account_id, payload)
    return MutationResponse(message="Parent data saved", data=result)


@router.post("/{account_id}/group", response_model=MutationResponse)
def assign_group(
    account_id: int,
    payload: GroupAssignIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.GROUP_ASSIGN)),
) -> MutationResponse:
    result = candidate_service.assign_group(db, account_id, payload.grupa_id)
    return MutationResponse(message="Candidate assigned to group", data=result)


@router.post("/{account_id}/witness", response_model=MutationResponse)
def save_witness(
    account_id: int,
    payload: WitnessIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.WITNESS_SAVE)),
) -> MutationResponse:
    result = candidate_service.save_witness(db, account_id, payload)
    return MutationResponse(message="Witness data saved", data=result)


@router.post("/{account_id}/confirmation-name", response_model=MutationResponse)
def save_confirmation_name(
    account_id: int,
    payload: ConfirmationNameIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.CONFIRMATION_NAME_SAVE)),
) -> MutationResponse:
    result = candidate_service.save_confirmation_name(db, account_id, payload)
    return MutationResponse(message="Confirmation name saved", data=result)


@router.post("/{account_id}/school", response_model=MutationResponse)
def save_school(
    account_id: int,
    payload: SchoolEnrollmentIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.SCHOOL_SAVE)),
) -> MutationResponse:
    result = candidate_service.save_school_enrollment(db, account_id, payload)
    return MutationResponse(message="School data saved", data=result)


@router.post("/{account_id}/parish", response_model=MutationResponse)
def assign_parish(
    account_id: int,
    payload: ParishAssignIn,
    db: Session = Depends(get_db),
    _: TokenClaims = Depends(authorize(capabilities.PARISH_ASSIGN)),
) -> MutationResponse:
    result = candidate_service.assign_parish(db, account_id, payload.parafia_id)
    return MutationResponse(message="Candidate assigned to parish", data=result)
