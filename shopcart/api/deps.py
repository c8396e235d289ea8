from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopcart.core.database import get_database
from shopcart.core.security import decode_access_token
from shopcart.services.cart_service import CartService

# Security scheme
security = HTTPBearer()


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency to get database instance."""
    return get_database()


async def get_current_user_email(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> str:
    """
    Dependency to get the email of the authenticated caller.
    
    Tokens are issued and verified by the authentication service; the cart
    service only reads the email claim.
    
    Raises:
        HTTPException: If token is invalid or has no email
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    
    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise credentials_exception
    
    email = payload.get("email")
    if not email:
        raise credentials_exception
    
    return email


async def get_cart_service(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> CartService:
    """Dependency to get a cart service bound to the database."""
    return CartService(db)
