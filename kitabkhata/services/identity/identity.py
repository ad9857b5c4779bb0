"""
Identity

Turns a shop login or a Google sign-in into a User record.

CRITICAL: This is for display only. Tokens are decoded, NOT verified,
and the ledger is never gated on who is signed in.
"""

import base64
import binascii
import json
import time
from typing import Optional
from urllib.parse import quote

from pydantic import ValidationError

from kitabkhata.models.transaction import User


AVATAR_URL = "https://ui-avatars.com/api/?name={name}&background=2563eb&color=fff"


class IdentityError(Exception):
    """Sign-in data could not be turned into a profile."""
    pass


def user_from_manual_login(name: str, now_ms: Optional[int] = None) -> User:
    """
    Profile for the "shop login" form: just a name.

    "Vikas Ji" -> vikas.ji@shop.local, id local-<epoch ms>.
    """
    name = (name or "").strip()
    if not name:
        raise IdentityError("Please enter your name to continue")

    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return User(
        name=name,
        email=f"{name.lower().replace(' ', '.', 1)}@shop.local",
        picture=AVATAR_URL.format(name=quote(name, safe="")),
        id=f"local-{now_ms}",
    )


def _decode_segment(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    raw = base64.urlsafe_b64decode(padded.encode("ascii"))
    return json.loads(raw)


def user_from_id_token(credential: str) -> User:
    """Profile from the payload of a Google ID token (name, email, picture, sub)."""
    parts = (credential or "").split(".")
    if len(parts) < 2:
        raise IdentityError("Sign-in token is malformed")

    try:
        payload = _decode_segment(parts[1])
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise IdentityError(f"Sign-in token could not be decoded: {e}") from e

    try:
        return User(
            name=payload.get("name", ""),
            email=payload.get("email", ""),
            picture=payload.get("picture", ""),
            id=payload.get("sub", ""),
        )
    except (AttributeError, ValidationError) as e:
        raise IdentityError(f"Sign-in token is missing profile fields: {e}") from e
