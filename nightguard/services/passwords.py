"""Password hashing."""
from passlib.context import CryptContext

# pbkdf2 keeps hashing pure-python; the salt is embedded in the hash string
pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto"
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)
