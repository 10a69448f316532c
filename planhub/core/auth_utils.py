from __future__ import annotations

from datetime import datetime, timedelta, timezone
import hashlib
import hmac
import secrets

_PASSWORD_METHOD = "pbkdf2_sha256"
_PASSWORD_ITERATIONS = 260_000


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def parse_iso(value: str) -> datetime:
    normalized = (value or "").strip()
    if not normalized:
        return utcnow()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    parsed = datetime.fromisoformat(normalized)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _pbkdf2(password: str, salt: str, iterations: int) -> str:
    return hashlib.pbkdf2_hmac(
        "sha256",
        (password or "").encode("utf-8"),
        salt.encode("utf-8"),
        iterations,
    ).hex()


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password is required.")
    salt = secrets.token_hex(16)
    digest = _pbkdf2(password, salt, _PASSWORD_ITERATIONS)
    return f"{_PASSWORD_METHOD}${_PASSWORD_ITERATIONS}${salt}${digest}"


def verify_password(password: str, encoded_password: str) -> bool:
    parts = (encoded_password or "").split("$", 3)
    if len(parts) != 4 or parts[0] != _PASSWORD_METHOD:
        return False
    _, iter_text, salt, expected_digest = parts
    try:
        iterations = int(iter_text)
    except ValueError:
        return False
    return hmac.compare_digest(_pbkdf2(password, salt, iterations), expected_digest)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    return hashlib.sha256((token or "").encode("utf-8")).hexdigest()


def session_expiry(hours: int) -> datetime:
    return utcnow() + timedelta(hours=max(1, int(hours)))
