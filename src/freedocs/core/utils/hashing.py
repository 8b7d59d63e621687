"""Short content hashes for stable section ids and cache keys"""

import hashlib


def sha256(content: str) -> str:
    """Return hex-encoded SHA-256 hash of content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def short_hash(content: str, length: int = 8) -> str:
    """Return the first `length` hex chars of the SHA-256 of content."""
    return sha256(content)[:length]
