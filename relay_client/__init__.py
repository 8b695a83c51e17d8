"""
Line relay client package.
"""

from relay_client.client import Client

__all__ = ['Client']
