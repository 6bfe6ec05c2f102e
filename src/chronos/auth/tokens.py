"""
Collector sync tokens.

A token is a stateless HS256 JWT:

    {"userId": 7, "email": "a@b.c", "type": "rust-client", "iat": ..., "exp": ...}

Nothing is recorded at issuance, so tokens cannot be revoked individually;
they simply expire `token_ttl_days` after they were minted. The `type` claim
is the capability tag: only collector tokens are accepted on /sync.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from chronos.models.user import User

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
COLLECTOR_TOKEN_TYPE = "rust-client"
DEFAULT_TTL = timedelta(days=30)
BEARER_PREFIX = "Bearer "

TOKEN_INSTRUCTIONS = "Token generated successfully. Use this in your desktop collector."


class TokenError(Exception):
    """Credential rejected. The message is safe to return to the client."""


@dataclass
class CollectorClaims:
    user_id: int
    email: str


def issue_collector_token(
    user: User,
    secret: str,
    ttl: timedelta = DEFAULT_TTL,
    now: Optional[datetime] = None,
) -> str:
    """Mint a signed collector token for `user` expiring `ttl` after `now`."""
    issued_at = now or datetime.now(timezone.utc)
    claims = {
        "userId": user.id,
        "email": user.email,
        "type": COLLECTOR_TOKEN_TYPE,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Raises:
        TokenError: header missing or not of the form "Bearer <token>".
    """
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise TokenError("Missing or invalid authorization header")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise TokenError("Missing or invalid authorization header")
    return token


def verify_collector_token(authorization: Optional[str], secret: str) -> CollectorClaims:
    """
    Check signature, expiry, and capability tag of a bearer credential.

    The embedded user id is trusted as-is; the user row is not re-read.

    Raises:
        TokenError: on any failure.
    """
    token = extract_bearer_token(authorization)

    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired collector token")
        raise TokenError("Invalid token")
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected collector token: %s", type(exc).__name__)
        raise TokenError("Invalid token")

    if payload.get("type") != COLLECTOR_TOKEN_TYPE:
        logger.info("Rejected token with type %r", payload.get("type"))
        raise TokenError("Invalid token type")

    user_id = payload.get("userId")
    email = payload.get("email")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(email, str):
        raise TokenError("Invalid token")

    return CollectorClaims(user_id=user_id, email=email)
