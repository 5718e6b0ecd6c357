"""
Real-time channel client.
"""

from smart_wallet_client.ws.client import Publication, RealtimeClient, Subscription

__all__ = ["Publication", "RealtimeClient", "Subscription"]
