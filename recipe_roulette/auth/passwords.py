from __future__ import annotations

import bcrypt

_BCRYPT_ROUNDS = 12

# bcrypt only reads the first 72 bytes and newer releases refuse anything longer
MAX_PASSWORD_BYTES = 72


def password_too_long(plain: str) -> bool:
    return len(plain.encode()) > MAX_PASSWORD_BYTES


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=_BCRYPT_ROUNDS)).decode()


def verify_password(plain: str, hashed: str) -> bool:
    if password_too_long(plain):
        return False
    return bcrypt.checkpw(plain.encode(), hashed.encode())
