from passlib.context import CryptContext

from src.config.manager import settings


class HashGenerator:
    def __init__(self):
        # Layer 2 hashes new passwords; layer 1 stays verifiable so older hashes keep working
        schemes = list(dict.fromkeys([settings.HASHING_ALGORITHM_LAYER_2, settings.HASHING_ALGORITHM_LAYER_1]))
        self._hash_ctx: CryptContext = CryptContext(schemes=schemes, default=schemes[0], deprecated="auto")
        self._hash_ctx_salt: str = settings.HASHING_SALT

    @property
    def _get_hashing_salt(self) -> str:
        return self._hash_ctx_salt

    def generate_password_hash(self, password: str) -> str:
        """
        Hash the account's password prefixed with the configured HASHING_SALT.
        The scheme itself adds a random salt to every hash.
        """
        return self._hash_ctx.hash(secret=self._get_hashing_salt + password)

    def is_password_verified(self, password: str, hashed_password: str) -> bool:
        return self._hash_ctx.verify(secret=self._get_hashing_salt + password, hash=hashed_password)


def get_hash_generator() -> HashGenerator:
    return HashGenerator()


hash_generator: HashGenerator = get_hash_generator()
