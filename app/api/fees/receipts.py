"""
Receipt number generation.
Format: RCT- followed by 26 uppercase base32 characters (128 random bits).
Uniqueness is enforced by the unique constraint on fee_payments.receipt_number;
callers regenerate on a collision.
"""

import base64
import re
import secrets

RECEIPT_PREFIX = "RCT-"
RECEIPT_RANDOM_BYTES = 16

RECEIPT_PATTERN = re.compile(r"^RCT-[A-Z2-7]{26}$")


def generate_receipt_number() -> str:
    """
    Generate a receipt number from 128 bits of cryptographic randomness.

    Example:
        RCT-K5QW3ZJ7MBXN2RTD4HVY6PLAGE
    """
    raw = secrets.token_bytes(RECEIPT_RANDOM_BYTES)
    encoded = base64.b32encode(raw).decode("ascii").rstrip("=")
    return RECEIPT_PREFIX + encoded


def is_receipt_number(value: str) -> bool:
    return bool(RECEIPT_PATTERN.match(value or ""))
