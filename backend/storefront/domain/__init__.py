"""
Domain Layer - Business Entities

Pydantic models for catalog products, uploaded photos, carts and orders.
"""
from storefront.domain.product import Product, ProductPhoto, ProductWrite, PhotoUpload
from storefront.domain.order import Order, CartLineItem, CheckoutRequest

__all__ = [
    'Product',
    'ProductPhoto',
    'ProductWrite',
    'PhotoUpload',
    'Order',
    'CartLineItem',
    'CheckoutRequest',
]
