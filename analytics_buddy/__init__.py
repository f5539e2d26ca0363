"""
Customer Analytics Buddy

Shopify customer analytics dashboard API.
"""

__version__ = "1.0.0"
