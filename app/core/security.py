import hmac, hashlib
from datetime import datetime, timezone
from jose import jwt, JWTError
from .config import SESSION_KEY_PEPPER, SESSION_TTL_SECONDS


def session_key_digest(token: str, pepper: str = SESSION_KEY_PEPPER) -> str:
    return hmac.new(pepper.encode(), token.encode(), hashlib.sha256).hexdigest()


def token_expiry(token: str) -> datetime | None:
    # Tokens are signed by the remote API; only the claims are read here.
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    exp = claims.get("exp")
    if exp is None:
        return None
    try:
        return datetime.fromtimestamp(int(exp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None


def is_token_expired(token: str, *, leeway_seconds: int = 5) -> bool:
    expires_at = token_expiry(token)
    if expires_at is None:
        return False
    return (expires_at - datetime.now(timezone.utc)).total_seconds() < -leeway_seconds


def session_ttl_for(token: str) -> int:
    expires_at = token_expiry(token)
    if expires_at is None:
        return SESSION_TTL_SECONDS
    remaining = int((expires_at - datetime.now(timezone.utc)).total_seconds())
    return max(1, min(SESSION_TTL_SECONDS, remaining))
