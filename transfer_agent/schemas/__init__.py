"""Pydantic schemas package."""

from .document import DocumentList, FilingDocument, UploadResult
from .issuer import (
    IssuerImport,
    IssuerImportResponse,
    IssuerListItem,
    IssuerPatchResponse,
    IssuerRead,
    IssuerUpdate,
    SeparationRatioUpdate,
)
from .restriction import (
    RestrictionTemplateCreate,
    RestrictionTemplateRead,
    ShareholderRestrictionCreate,
    ShareholderRestrictionDetail,
    ShareholderRestrictionRead,
)
from .security import SecurityCreate, SecurityRead
from .session import AvailableIssuer, IssuerAccessRead, SessionContext, SessionUser, UserRead
from .shareholder import (
    IssuerShareholderRead,
    ShareholderCreate,
    ShareholderHoldings,
    ShareholderRead,
)
from .transfer import (
    ShareholderTransactions,
    StatementRead,
    TransferImportResponse,
    TransferImportRow,
    TransferRead,
)

__all__ = [
    "AvailableIssuer",
    "DocumentList",
    "FilingDocument",
    "IssuerAccessRead",
    "IssuerImport",
    "IssuerImportResponse",
    "IssuerListItem",
    "IssuerPatchResponse",
    "IssuerRead",
    "IssuerShareholderRead",
    "IssuerUpdate",
    "RestrictionTemplateCreate",
    "RestrictionTemplateRead",
    "SecurityCreate",
    "SecurityRead",
    "SeparationRatioUpdate",
    "SessionContext",
    "SessionUser",
    "ShareholderCreate",
    "ShareholderHoldings",
    "ShareholderRead",
    "ShareholderRestrictionCreate",
    "ShareholderRestrictionDetail",
    "ShareholderRestrictionRead",
    "ShareholderTransactions",
    "StatementRead",
    "TransferImportResponse",
    "TransferImportRow",
    "TransferRead",
    "UploadResult",
]
