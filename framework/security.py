import hmac
from passlib.context import CryptContext
from framework.config import settings

# Password hashing (BCrypt), opt-in through HASH_PASSWORDS
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def prepare_password(password: str) -> str:
    """Value to persist for a new password: bcrypt hash or the password verbatim."""
    if settings.HASH_PASSWORDS:
        return get_password_hash(password)
    return password


def verify_password(plain_password: str, stored_password: str) -> bool:
    """
    Check a login attempt against the stored value.

    Stored values written before hashing was enabled are plain text and are
    compared exactly; recognised hashes go through passlib.
    """
    if not isinstance(stored_password, str):
        return False
    if pwd_context.identify(stored_password, required=False) is None:
        return hmac.compare_digest(plain_password.encode("utf-8"), stored_password.encode("utf-8"))
    return pwd_context.verify(plain_password, stored_password)
