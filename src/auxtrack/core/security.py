"""Password policy, hashing and verification."""

from pwdlib import PasswordHash

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128

# Argon2 via pwdlib's recommended profile
password_hash = PasswordHash.recommended()


def check_password_policy(password: str) -> str:
    """Return the password unchanged or raise ValueError describing the violation.

    Shared by the user schemas and the createuser CLI so both enforce the same rule.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValueError(f"Password cannot exceed {MAX_PASSWORD_LENGTH} characters")
    if password.isdigit() or password.isalpha():
        raise ValueError("Password must mix letters with digits or symbols")
    return password


def hash_password(password: str) -> str:
    return password_hash.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return password_hash.verify(plain_password, hashed_password)
