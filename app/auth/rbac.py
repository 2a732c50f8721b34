from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import AccountType


def can_administer(account_type: AccountType) -> bool:
    """Whether an account type may perform administrator-only mutations."""
    if account_type is AccountType.ADMINISTRATOR:
        return True
    if account_type is AccountType.ACCOUNTANT:
        return False
    raise ValueError(f"Unhandled account type: {account_type!r}")


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Require the Administrator account type."""
    if not can_administer(current_user.account_type):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Administrator privileges required.",
        )
    return current_user
