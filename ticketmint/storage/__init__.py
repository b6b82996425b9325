"""Content-addressed storage (IPFS) for published ticket artifacts."""

from ticketmint.storage.ipfs_client import IpfsClient

__all__ = ["IpfsClient"]
