import hashlib
import hmac
import secrets

PBKDF2_ITERATIONS = 100000


def hash_password(password: str) -> str:
    """Хеш пароля в формате salt$hash (pbkdf2-sha256)"""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        PBKDF2_ITERATIONS
    )
    return f"{salt}${digest.hex()}"


def verify_password(password: str, password_hash: str) -> bool:
    """Проверка учётных данных: сравнивает пароль с сохранённым хешем"""
    try:
        salt, stored_hash = password_hash.split('$')
    except ValueError:
        return False
    
    digest = hashlib.pbkdf2_hmac(
        'sha256',
        password.encode('utf-8'),
        salt.encode('utf-8'),
        PBKDF2_ITERATIONS
    )
    return hmac.compare_digest(digest.hex(), stored_hash)
