ADMINISTRATOR = "administrator"
PASTOR = "duszpasterz"
OFFICE = "kancelaria"
ANIMATOR = "animator"
PARENT = "rodzic"
CANDIDATE = "kandydat"

ALL_ROLES = (ADMINISTRATOR, PASTOR, OFFICE, ANIMATOR, PARENT, CANDIDATE)
STAFF_ROLES = (ADMINISTRATOR, PASTOR, OFFICE)
