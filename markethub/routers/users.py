# markethub/routers/users.py
from fastapi import APIRouter, Depends

from markethub.core.auth import require_auth
from markethub.models.user import User
from markethub.schemas.user import UserRead

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The storefront calls this right after login to learn the account id
    its cart now belongs to.

    Auth:
      - Requires a valid bearer JWT.
    """
    return current_user
