"""
Services package - order streams and catalog seeding.
"""
from app.services.order_stream import OrderStream

__all__ = ['OrderStream']
