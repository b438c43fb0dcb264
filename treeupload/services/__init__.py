"""Services for treeupload."""
from .api_client import PortalClient, random_identifier

__all__ = [
    "PortalClient",
    "random_identifier",
]
