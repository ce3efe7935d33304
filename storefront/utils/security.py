# storefront/utils/security.py
import hashlib
import hmac
import secrets
import time
from typing import Optional, Tuple
from ..config import Config

PBKDF2_ITERATIONS = 260000

def hash_password(password: str) -> str:
    """Hash a password as ``salt$digest`` with PBKDF2-HMAC-SHA256"""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode(),
        salt.encode(),
        PBKDF2_ITERATIONS
    ).hex()
    return f"{salt}${digest}"

def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash"""
    try:
        salt, digest = password_hash.split('$', 1)
    except ValueError:
        return False

    expected = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode(),
        salt.encode(),
        PBKDF2_ITERATIONS
    ).hex()
    return hmac.compare_digest(digest, expected)

def _sign(message: str) -> str:
    return hmac.new(
        Config.SECRET_KEY.encode(),
        message.encode(),
        hashlib.sha256
    ).hexdigest()

def generate_access_token(user_id: str, role: str) -> str:
    """Issue a signed access token"""
    timestamp = int(time.time())
    message = f"{user_id}:{role}:{timestamp}"
    return f"{message}:{_sign(message)}"

def verify_access_token(token: str) -> Optional[Tuple[str, str]]:
    """Return (user_id, role) for a valid, unexpired token"""
    try:
        message, signature = token.rsplit(':', 1)
        user_id, role, timestamp = message.split(':')

        # Signature check
        if not hmac.compare_digest(signature, _sign(message)):
            return None

        # Expiry check
        if int(time.time()) - int(timestamp) > Config.TOKEN_TTL_SECONDS:
            return None

        return user_id, role

    except ValueError:
        return None
