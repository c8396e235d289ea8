import logging
from typing import Optional

import jwt

from shopcart.core.config import settings

logger = logging.getLogger(__name__)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decode a JWT issued by the authentication service.
    
    Returns the payload, or None if the token is invalid or expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None
