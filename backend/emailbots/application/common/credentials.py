"""Bot API credentials: shown once when issued, stored only as a bcrypt hash."""

import uuid

import bcrypt


def generate_api_key(prefix: str = "agc-") -> str:
    return f"{prefix}{uuid.uuid4()}"


def hash_api_key(api_key: str) -> str:
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(api_key.encode("utf-8"), salt)
    return hashed.decode("utf-8")


def verify_api_key(api_key: str, hashed: str) -> bool:
    return bcrypt.checkpw(api_key.encode("utf-8"), hashed.encode("utf-8"))
