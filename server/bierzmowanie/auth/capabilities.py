"""Declarative map of action -> roles allowed to perform it.

``roles`` is the route gate (any one role suffices). For ``self_scoped``
actions the caller may only target their own account id unless they hold one
of the ``privileged`` roles.
"""

from __future__ import annotations

from dataclasses import dataclass

from bierzmowanie.auth.roles import ADMINISTRATOR, ANIMATOR, CANDIDATE, OFFICE, PARENT, PASTOR, STAFF_ROLES


@dataclass(frozen=True)
class Capability:
    roles: frozenset[str]
    privileged: frozenset[str] = frozenset()
    self_scoped: bool = False

    def allows(self, roles) -> bool:
        return any(role in self.roles for role in roles)

    def bypasses_ownership(self, roles) -> bool:
        return any(role in self.privileged for role in roles)


def _capability(roles, privileged=(), self_scoped: bool = False) -> Capability:
    return Capability(roles=frozenset(roles), privileged=frozenset(privileged), self_scoped=self_scoped)


CANDIDATE_READ = "candidate.read"
PARENT_SAVE = "candidate.parent.save"
GROUP_ASSIGN = "candidate.group.assign"
WITNESS_SAVE = "candidate.witness.save"
CONFIRMATION_NAME_SAVE = "candidate.confirmation_name.save"
SCHOOL_SAVE = "candidate.school.save"
PARISH_ASSIGN = "candidate.parish.assign"
ACCOUNT_CREATE = "account.create"
ACCOUNT_UPDATE = "account.update"
ACCOUNT_DELETE = "account.delete"
ACCOUNT_CHILDREN_LINK = "account.children.link"
ACCOUNT_GROUPS_ASSIGN = "account.groups.assign"
GROUP_MEMBERS_REPLACE = "group.members.replace"

CAPABILITIES: dict[str, Capability] = {
    # Animators and parents pass the gate here but are still held to their own
    # id; finer "animator of this group" / "parent of this child" checks are not
    # applied yet.
    CANDIDATE_READ: _capability(
        (CANDIDATE, *STAFF_ROLES, ANIMATOR, PARENT),
        privileged=STAFF_ROLES,
        self_scoped=True,
    ),
    PARENT_SAVE: _capability((CANDIDATE, *STAFF_ROLES), privileged=STAFF_ROLES, self_scoped=True),
    GROUP_ASSIGN: _capability((*STAFF_ROLES, ANIMATOR)),
    WITNESS_SAVE: _capability(
        (CANDIDATE, *STAFF_ROLES, ANIMATOR, PARENT),
        privileged=(*STAFF_ROLES, ANIMATOR, PARENT),
        self_scoped=True,
    ),
    CONFIRMATION_NAME_SAVE: _capability((CANDIDATE, *STAFF_ROLES), privileged=STAFF_ROLES, self_scoped=True),
    SCHOOL_SAVE: _capability((CANDIDATE, *STAFF_ROLES), privileged=STAFF_ROLES, self_scoped=True),
    PARISH_ASSIGN: _capability((CANDIDATE, *STAFF_ROLES), privileged=STAFF_ROLES, self_scoped=True),
    ACCOUNT_CREATE: _capability((ADMINISTRATOR, OFFICE)),
    ACCOUNT_UPDATE: _capability((ADMINISTRATOR, OFFICE)),
    ACCOUNT_DELETE: _capability((ADMINISTRATOR,)),
    ACCOUNT_CHILDREN_LINK: _capability((ADMINISTRATOR, PASTOR, OFFICE)),
    ACCOUNT_GROUPS_ASSIGN: _capability((ADMINISTRATOR,)),
    GROUP_MEMBERS_REPLACE: _capability((*STAFF_ROLES, ANIMATOR)),
}
