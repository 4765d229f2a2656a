"""Client-side data synchronization: query cache and CRM client."""

from .cache import QueryCache, QueryKey, QueryState, Subscription
from .client import CRMClient

__all__ = ["CRMClient", "QueryCache", "QueryKey", "QueryState", "Subscription"]
