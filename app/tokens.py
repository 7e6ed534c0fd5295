import time
from typing import Optional

import jwt


class InvalidApiKeyError(ValueError):
    """Raised when a signing key is not in the "<id>.<secret>" format."""


def generate_token(api_key: str, exp_seconds: int, now: Optional[int] = None) -> str:
    """
    Mint a short-lived HS256 token for providers that reject static bearer keys.

    The key is split once into an id (sent as the ``api_key`` claim) and the
    signing secret. ``exp`` and ``timestamp`` are both in seconds.
    """
    if not api_key or not isinstance(api_key, str) or "." not in api_key:
        raise InvalidApiKeyError("Invalid Zhipu API key format provided.")

    key_id, secret = api_key.split(".", 1)
    if not key_id or not secret:
        raise InvalidApiKeyError("Invalid Zhipu API key format provided.")

    now_seconds = int(time.time()) if now is None else now
    payload = {
        "api_key": key_id,
        "exp": now_seconds + exp_seconds,
        "timestamp": now_seconds,
    }
    return jwt.encode(
        payload,
        secret,
        algorithm="HS256",
        headers={"alg": "HS256", "sign_type": "SIGN"},
    )
