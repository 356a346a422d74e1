"""
PricePulse Price Worker
Periodic price discovery and comparison matching for tracked products
"""

__version__ = '0.1.0'
