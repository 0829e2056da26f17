"""
Authentication module for the Marketplace API
Handles identity verification and the bearer-token authentication dependency
"""
from fastapi import HTTPException, Depends, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from typing import Optional, Protocol
import logging

from marketplace_api.models import Principal
from marketplace_api.utils import error_payload

logger = logging.getLogger(__name__)

# auto_error is off so a missing header and a non-bearer scheme both reach
# get_current_principal and answer 401 with our payload
security = HTTPBearer(auto_error=False)


class VerificationError(Exception):
    """Raised when a credential cannot be verified."""


class IdentityVerifier(Protocol):
    def verify(self, credential: str) -> Principal:
        ...


class JWTIdentityVerifier:
    """
    Verify signed bearer tokens with python-jose.

    Key material comes from the decoded service-identity credential blob:
    ``secret_key`` (HMAC) or ``public_key`` (RSA/EC), ``algorithm`` and the
    optional ``issuer`` and ``audience`` claims to enforce.
    """

    def __init__(self, credentials: dict):
        self.key = credentials.get("public_key") or credentials.get("secret_key")
        self.algorithm = credentials.get("algorithm", "HS256")
        self.issuer = credentials.get("issuer")
        self.audience = credentials.get("audience")

    def verify(self, credential: str) -> Principal:
        if not self.key:
            raise VerificationError("No verification key configured")
        try:
            payload = jwt.decode(
                credential,
                self.key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                audience=self.audience,
            )
        except JWTError as e:
            raise VerificationError(str(e))

        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise VerificationError("Token has no email claim")
        return Principal(email=email)


def get_identity_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.verifier


async def get_current_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    verifier: IdentityVerifier = Depends(get_identity_verifier),
) -> Principal:
    """Require a verified bearer token and bind its principal to the request"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=error_payload("UNAUTHENTICATED", "Unauthorized access"),
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = verifier.verify(credentials.credentials)
    except VerificationError as e:
        logger.info(f"Token verification failed on {request.url.path}: {e}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=error_payload("INVALID_TOKEN", "Forbidden access"),
        )

    request.state.principal = principal
    return principal
