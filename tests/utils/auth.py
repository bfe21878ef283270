from typing import Optional

from jose import jwt
from app.core.config import settings
from app.schemas.token import TokenPayload


def get_user_authentication_headers(
    user_id: str = "usr_testuser0001", role: Optional[str] = None
) -> dict[str, str]:
    """
    Generates a valid JWT token and authentication headers for a test user.
    """
    payload = TokenPayload(
        sub=user_id, org_id="org_test", role=role, exp=9999999999
    )  # High expiration for tests
    token = jwt.encode(
        payload.model_dump(exclude_none=True),
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )
    return {"Authorization": f"Bearer {token}"}


def get_admin_authentication_headers(user_id: str = "usr_testadmin001") -> dict[str, str]:
    return get_user_authentication_headers(user_id=user_id, role="admin")


def make_token_payload(user_id: str = "usr_testuser0001", role: Optional[str] = None) -> TokenPayload:
    return TokenPayload(sub=user_id, role=role, exp=9999999999)
