import logging
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel
from app.core.config import settings
from app.core.errors import AuthorizationError, UnauthenticatedError
from app.core.logging import user_id_ctx

logger = logging.getLogger(__name__)

http_bearer = HTTPBearer(auto_error=False)

class Principal(BaseModel):
    user_id: str
    email: str | None = None
    admin: bool = False

def _decode_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG], audience=settings.REQUIRED_AUDIENCE)
        return payload
    except JWTError as e:
        logger.info(f"Rejected token: {e}")
        raise UnauthenticatedError()

def principal_from_claims(data: dict) -> Principal:
    user_id = data.get("sub") or data.get("user_id")
    if not user_id:
        raise UnauthenticatedError()
    # only a literal true grants access; "true", 1 etc. do not
    return Principal(user_id=str(user_id), email=data.get("email"), admin=data.get(settings.ADMIN_CLAIM) is True)

async def get_principal(request: Request, creds: HTTPAuthorizationCredentials | None = Depends(http_bearer)) -> Principal:
    # In local dev, allow missing token and act as a local admin
    if creds is None and settings.ENV == "local":
        principal = Principal(user_id="local-admin", admin=True)
    elif creds is None:
        raise UnauthenticatedError()
    else:
        principal = principal_from_claims(_decode_token(creds.credentials))
    user_id_ctx.set(principal.user_id)
    # the request log line is written outside this task's context
    request.state.user_id = principal.user_id
    return principal

def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.admin:
        raise AuthorizationError()
    return principal
