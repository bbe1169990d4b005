# tokengate/infra/security/werkzeug_password_hasher.py
from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash, generate_password_hash

from tokengate.services._shared.ports import PasswordHasher

DEFAULT_METHOD = "pbkdf2:sha256:600000"


@dataclass(frozen=True, slots=True)
class WerkzeugPasswordHasher(PasswordHasher):
    """
    Password hasher backed by :mod:`werkzeug.security`.

    :param method: Werkzeug method string; the trailing parameters are the
        work factor (``pbkdf2:sha256:<iterations>`` or ``scrypt:<n>:<r>:<p>``).
    :param salt_length: Length of the random salt generated per hash.

    Hashes are self-describing (``method$salt$hash``), so raising the work
    factor later keeps existing hashes verifiable.
    """

    method: str = DEFAULT_METHOD
    salt_length: int = 16

    def hash(self, plaintext: str) -> str:
        """Return a salted hash of ``plaintext``."""
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, hashed: str) -> bool:
        """
        Compare ``plaintext`` against ``hashed`` in constant time.

        :returns: ``False`` for a mismatch and for hashes Werkzeug cannot parse.
        """
        if not hashed or not isinstance(plaintext, str):
            return False
        try:
            return bool(check_password_hash(hashed, plaintext))
        except (ValueError, TypeError):
            return False
