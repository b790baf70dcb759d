"""ORM models package."""
from .base import Base, TimestampMixin
from .issuer import Issuer
from .position import ShareholderPosition
from .restriction import RestrictionTemplate, ShareholderRestriction
from .security import Security
from .shareholder import Shareholder
from .transfer import Transfer
from .user import InvitedUser, IssuerUser, Role, RoleName, User

__all__ = [
    "Base",
    "InvitedUser",
    "Issuer",
    "IssuerUser",
    "RestrictionTemplate",
    "Role",
    "RoleName",
    "Security",
    "Shareholder",
    "ShareholderPosition",
    "ShareholderRestriction",
    "TimestampMixin",
    "Transfer",
    "User",
]
