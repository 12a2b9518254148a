"""Authentication helpers.

Auth is kept lightweight:

- Users table (email/password hash)
- JWT access tokens sent as `Authorization: Bearer <token>`

Every protected request re-reads the token subject from the users table.
"""

from .deps import get_current_user
from .crud import create_user, seed_default_user_if_needed

__all__ = [
    "get_current_user",
    "create_user",
    "seed_default_user_if_needed",
]
