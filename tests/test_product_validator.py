"""
Tests for product validation against the catalog.
"""
import pytest
import requests
from datetime import datetime
from unittest.mock import MagicMock, patch

from shopcart.core.exceptions import ErrorKind, ProductNotFound, ValidationUnavailable
from shopcart.models.cart import CartItem
from shopcart.schemas.cart import CartItemInput
from shopcart.services.product_validator import ProductValidator


def make_response(status_code=200, body=None, malformed=False):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if malformed:
        response.json.side_effect = ValueError("Expecting value")
    else:
        response.json.return_value = body
    return response


class TestValidate:
    """Test ProductValidator.validate."""
    
    @pytest.mark.asyncio
    async def test_existing_product_returns_normalized_item(self):
        """Test that all line item fields are copied verbatim."""
        validator = ProductValidator(base_url="http://catalog/products/", timeout=2)
        item = CartItemInput(
            product_id="p7",
            quantity=3,
            purchase_option="rent",
            start_date=datetime(2024, 6, 1),
            end_date=datetime(2024, 6, 8),
            customization={"engraving": "hello", "size": 42}
        )
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(200, {"_id": "p7", "price": 99.0})
        ) as mock_get:
            result = await validator.validate(item)
        
        mock_get.assert_called_once_with("http://catalog/products/p7", timeout=2)
        assert isinstance(result, CartItem)
        assert result.product_id == "p7"
        assert result.quantity == 3
        assert result.purchase_option == "rent"
        assert result.start_date == datetime(2024, 6, 1)
        assert result.end_date == datetime(2024, 6, 8)
        assert result.customization == {"engraving": "hello", "size": 42}
    
    @pytest.mark.asyncio
    async def test_price_is_not_cached_on_item(self):
        """Test that product attributes are not copied onto the cart item."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(200, {"_id": "p1", "price": 10.0})
        ):
            result = await validator.validate(CartItemInput(product_id="p1", quantity=1))
        
        assert "price" not in result.model_dump()
        assert result.purchase_option == "buy"
        assert result.customization == {}
    
    @pytest.mark.asyncio
    async def test_404_raises_product_not_found(self):
        """Test that a catalog 404 is reported as a missing product."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(404, {"message": "Not Found"})
        ):
            with pytest.raises(ProductNotFound) as exc_info:
                await validator.validate(CartItemInput(product_id="missing", quantity=1))
        
        assert exc_info.value.product_id == "missing"
        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert exc_info.value.status_code == 404
        assert "missing" in exc_info.value.detail
    
    @pytest.mark.asyncio
    async def test_empty_body_raises_product_not_found(self):
        """Test that a successful response without a product counts as not found."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(200, None)
        ):
            with pytest.raises(ProductNotFound):
                await validator.validate(CartItemInput(product_id="p1", quantity=1))
    
    @pytest.mark.asyncio
    async def test_server_error_raises_validation_unavailable(self):
        """Test that a 5xx is not mistaken for a missing product."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(503)
        ):
            with pytest.raises(ValidationUnavailable) as exc_info:
                await validator.validate(CartItemInput(product_id="p1", quantity=1))
        
        assert exc_info.value.kind == ErrorKind.UPSTREAM
        assert exc_info.value.status_code == 502
        assert exc_info.value.detail == "Failed to validate cart item."
    
    @pytest.mark.asyncio
    async def test_connection_error_raises_validation_unavailable(self):
        """Test that network failures do not leak internal detail."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            side_effect=requests.exceptions.ConnectionError("connection refused to 10.0.0.3")
        ):
            with pytest.raises(ValidationUnavailable) as exc_info:
                await validator.validate(CartItemInput(product_id="p1", quantity=1))
        
        assert "10.0.0.3" not in exc_info.value.detail
    
    @pytest.mark.asyncio
    async def test_timeout_raises_validation_unavailable(self):
        """Test that a timeout is reported as unavailable."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            side_effect=requests.exceptions.Timeout()
        ):
            with pytest.raises(ValidationUnavailable):
                await validator.validate(CartItemInput(product_id="p1", quantity=1))
    
    @pytest.mark.asyncio
    async def test_product_id_is_escaped_in_catalog_url(self):
        """Test that an id with path characters cannot resolve to another product."""
        validator = ProductValidator(base_url="http://catalog/products", timeout=2)
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(404, {"message": "Not Found"})
        ) as mock_get:
            with pytest.raises(ProductNotFound) as exc_info:
                await validator.validate(CartItemInput(product_id="ghost/../p1", quantity=1))
        
        mock_get.assert_called_once_with("http://catalog/products/ghost%2F..%2Fp1", timeout=2)
        assert exc_info.value.product_id == "ghost/../p1"
    
    @pytest.mark.asyncio
    async def test_empty_product_id_never_reaches_catalog(self):
        """Test that an empty id is not looked up as the catalog listing."""
        validator = ProductValidator(base_url="http://catalog/products")
        item = CartItemInput.model_construct(product_id="", quantity=1)
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(200, [{"_id": "p1"}])
        ) as mock_get:
            with pytest.raises(ProductNotFound):
                await validator.validate(item)
        
        mock_get.assert_not_called()
    
    @pytest.mark.asyncio
    async def test_malformed_body_raises_validation_unavailable(self):
        """Test that a non-JSON body is reported as unavailable."""
        validator = ProductValidator(base_url="http://catalog")
        
        with patch(
            "shopcart.services.product_validator.requests.get",
            return_value=make_response(200, malformed=True)
        ):
            with pytest.raises(ValidationUnavailable):
                await validator.validate(CartItemInput(product_id="p1", quantity=1))


class TestCartItemInput:
    """Test line item input validation."""
    
    def test_quantity_must_be_positive(self):
        """Test that new line items need a quantity of at least one."""
        with pytest.raises(ValueError):
            CartItemInput(product_id="p1", quantity=0)
    
    def test_empty_product_id_rejected(self):
        """Test that a line item needs a product id."""
        with pytest.raises(ValueError):
            CartItemInput(product_id="", quantity=1)
    
    def test_unknown_purchase_option_rejected(self):
        """Test that only buy and rent are accepted."""
        with pytest.raises(ValueError):
            CartItemInput(product_id="p1", quantity=1, purchase_option="lease")
