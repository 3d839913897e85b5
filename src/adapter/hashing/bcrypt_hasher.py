"""bcrypt implementation of PasswordHasher.

The cost factor travels inside the digest ($2b$<cost>$...), so digests
produced under an older BCRYPT_ROUNDS setting keep verifying.
"""

import bcrypt

from domain.model.errors import HashingError

DEFAULT_ROUNDS = 10
MIN_ROUNDS = 4
MAX_ROUNDS = 31

# bcrypt 4.x truncates longer input silently, 5.x raises
MAX_PASSWORD_BYTES = 72


class BcryptPasswordHasher:
    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        if not MIN_ROUNDS <= rounds <= MAX_ROUNDS:
            raise ValueError(f"bcrypt rounds must be between {MIN_ROUNDS} and {MAX_ROUNDS}, got {rounds}")
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash password with a fresh salt.

        Raises:
            HashingError: password over 72 bytes, or bcrypt failed internally
        """
        try:
            encoded = password.encode('utf-8')
            if len(encoded) > MAX_PASSWORD_BYTES:
                raise ValueError(f"password cannot be longer than {MAX_PASSWORD_BYTES} bytes")
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(encoded, salt)
        except (ValueError, TypeError) as e:
            raise HashingError(f"Failed to hash password: {e}") from e
        return hashed.decode('utf-8')

    def verify(self, password: str, digest: str) -> bool:
        """Check password against digest. Never raises on mismatch or a malformed digest."""
        if not digest:
            return False
        try:
            encoded = password.encode('utf-8')
            if len(encoded) > MAX_PASSWORD_BYTES:
                return False
            return bcrypt.checkpw(encoded, digest.encode('utf-8'))
        except (ValueError, TypeError):
            return False
