from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from bierzmowanie.auth.roles import CANDIDATE
from bierzmowanie.core.db import transaction
from bierzmowanie.core.errors import NotFoundError
from bierzmowanie.models.account import Account
from bierzmowanie.models.group import Group, GroupMembership
from bierzmowanie.models.role import Role

logger = logging.getLogger(__name__)


def replace_group_members(db: Session, group_id: int, candidate_ids: list[int]) -> Group:
    """Make ``candidate_ids`` the whole membership of the group.

    A candidate belongs to one group at a time, so listed candidates leave any
    other group they were in.
    """
    candidate_ids = list(dict.fromkeys(candidate_ids))
    with transaction(db):
        group = db.query(Group).filter(Group.id == group_id).with_for_update().first()
        if group is None:
            raise NotFoundError("Group not found")
        if candidate_ids:
            found = (
                db.query(Account.id)
                .join(Account.roles)
                .filter(Account.id.in_(candidate_ids), Account.deleted_at.is_(None), Role.name == CANDIDATE)
                .all()
            )
            missing = set(candidate_ids) - {row.id for row in found}
            if missing:
                raise NotFoundError(f"Candidates not found: {', '.join(str(item) for item in sorted(missing))}")
        db.query(GroupMembership).filter(GroupMembership.group_id == group_id).delete(synchronize_session=False)
        if candidate_ids:
            db.query(GroupMembership).filter(GroupMembership.account_id.in_(candidate_ids)).delete(
                synchronize_session=False
            )
            db.add_all([GroupMembership(group_id=group_id, account_id=account_id) for account_id in candidate_ids])
        db.flush()
    logger.info("group_members_replaced", extra={"group_id": group_id, "candidate_ids": candidate_ids})
    return group
