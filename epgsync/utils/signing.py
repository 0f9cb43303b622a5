"""
Request signing helpers for providers using time-salted digests.
"""
import hashlib
import time


def sign_request(secret: str, now: float | None = None) -> tuple[str, str]:
    """
    Build the (timestamp, signature) pair for an authenticated request

    Args:
        secret: Shared secret (salt) published by the provider
        now: Unix time to sign, defaults to the current wall clock

    Returns:
        Tuple of (decimal Unix seconds, lowercase hex sha256 of secret + timestamp)
    """
    timestamp = str(int(time.time() if now is None else now))
    signature = hashlib.sha256(f"{secret}{timestamp}".encode("utf-8")).hexdigest()
    return timestamp, signature
