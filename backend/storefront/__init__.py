"""
Storefront - catalog management and checkout backend
"""
__version__ = "1.0.0"
