"""Password hashing with bcrypt."""

from passlib.context import CryptContext

DEFAULT_ROUNDS = 10


class PasswordHasher:
    """One-way password hashing and verification.

    Each call to ``hash`` draws a fresh salt which is embedded in the digest,
    so hashing the same password twice gives two different strings.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, password: str) -> str:
        """Hash a password."""
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str | None) -> bool:
        """Verify a password against its hash. Malformed hashes never match."""
        if not password_hash:
            return False
        try:
            return self._context.verify(password, password_hash)
        except (ValueError, TypeError):
            return False

    def dummy_verify(self) -> bool:
        """Spend the same time as a real verify when there is no hash to check."""
        return self._context.dummy_verify()
