"""
Product validation against the external product catalog.
"""
import logging

import requests
from fastapi.concurrency import run_in_threadpool

from shopcart.core.config import settings
from shopcart.core.exceptions import ProductNotFound, ValidationUnavailable
from shopcart.models.cart import CartItem
from shopcart.schemas.cart import CartItemInput

logger = logging.getLogger(__name__)


class ProductValidator:
    """Confirms cart items reference existing catalog products."""
    
    def __init__(self, base_url: str = None, timeout: float = None):
        self.base_url = (base_url or settings.PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.PRODUCT_LOOKUP_TIMEOUT
    
    def _lookup(self, product_id: str) -> dict:
        """
        Fetch a product from the catalog.
        
        Raises:
            ProductNotFound: The catalog answered 404 or returned no product
            ValidationUnavailable: Any other failure
        """
        if not product_id:
            raise ProductNotFound(product_id)
        
        # Ids are opaque; escape them so "/" or ".." cannot reach another catalog path
        url = f"{self.base_url}/{requests.utils.quote(product_id, safe='')}"
        
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Product lookup failed for {product_id}: {str(e)}")
            raise ValidationUnavailable()
        
        if response.status_code == 404:
            raise ProductNotFound(product_id)
        
        if not response.ok:
            logger.error(
                f"Product lookup for {product_id} returned HTTP {response.status_code}"
            )
            raise ValidationUnavailable()
        
        try:
            product = response.json()
        except ValueError:
            logger.error(f"Product lookup for {product_id} returned a malformed body")
            raise ValidationUnavailable()
        
        if not product:
            raise ProductNotFound(product_id)
        
        return product
    
    async def validate(self, item: CartItemInput) -> CartItem:
        """
        Validate one proposed line item and return its persisted shape.
        
        The catalog call is blocking, so it runs in the threadpool. Nothing
        from the product (price, stock) is copied onto the cart item.
        """
        await run_in_threadpool(self._lookup, item.product_id)
        
        return CartItem(
            product_id=item.product_id,
            quantity=item.quantity,
            purchase_option=item.purchase_option,
            start_date=item.start_date,
            end_date=item.end_date,
            customization=item.customization,
        )
