from .role import Role  # noqa: F401
from .address import Address, City, Street  # noqa: F401
from .account import Account, AccountEmail, AccountPhone, account_roles  # noqa: F401
from .candidate import (  # noqa: F401
    ConfirmationName,
    Parent,
    School,
    SchoolEnrollment,
    Witness,
    WitnessContact,
    parent_candidates,
)
from .group import Group, GroupMembership  # noqa: F401
from .parish import Parish, ParishInvocation, ParishMembership  # noqa: F401
