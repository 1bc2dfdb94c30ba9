import secrets
import string
import time

from sqlalchemy.orm import declarative_base

Base = declarative_base()

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id(prefix: str) -> str:
    """Text primary key: <prefix>-<base36 ms timestamp>-<6 random base36 chars>"""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return f"{prefix}-{to_base36(int(time.time() * 1000))}-{suffix}"


# common model methods
class BaseModel:
    """Base model class, providing common methods"""

    def __repr__(self):
        """String representation"""
        return f"<{self.__class__.__name__}(id={getattr(self, 'id', 'N/A')})>"
