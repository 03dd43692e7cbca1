"""Password hashing via werkzeug.security (salted scrypt/pbkdf2 hashes)."""

from werkzeug.security import check_password_hash, generate_password_hash

from relaychat.domain.ports.password_hasher import PasswordHasher


class WerkzeugPasswordHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return generate_password_hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        if not password or not password_hash:
            return False
        return check_password_hash(password_hash, password)
