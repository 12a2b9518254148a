"""Movie Backend - REST API for movies with JWT authentication.

- Users authenticate with email/password and receive a bearer token.
- Movies (title, publishing year, optional poster image) support
  paginated listing and CRUD, all behind the token check.

See README for setup and usage.
"""

__all__ = ["__version__"]

__version__ = "1.0.0"
