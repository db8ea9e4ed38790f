"""
Identifier and join-code generation.

Row ids are opaque strings: a short type prefix followed by a uuid4, e.g.
``class_6f1c...``. Class join codes are short, human-typeable and unique
across all classes; uniqueness is enforced by the caller against the table.
"""

import secrets
import string
import uuid

CLASS_CODE_LENGTH = 6
CLASS_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_id(prefix: str = "") -> str:
    return f"{prefix}{uuid.uuid4()}"


def generate_class_code(length: int = CLASS_CODE_LENGTH) -> str:
    """
    Generate a random class join code.

    Rules:
    - ``length`` characters, uppercase letters and digits only.

    Examples:
        K7Q2ZD
        0B4MXA

    Uses secrets for the random part.
    """
    return "".join(secrets.choice(CLASS_CODE_ALPHABET) for _ in range(length))
