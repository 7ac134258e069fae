# Authentication module

from pathforge.modules.auth.dependencies import (
    get_current_user,
    require_leader,
    require_member,
    require_team,
    require_onboarding,
)

__all__ = [
    "get_current_user",
    "require_leader",
    "require_member",
    "require_team",
    "require_onboarding",
]
