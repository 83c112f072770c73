"""
Periferia Social Backend — ORM Models
======================================

Importing this package registers every table with Base.metadata, which is
what Alembic autogenerate and Database.create_schema() rely on.
"""

from periferia_social.models.user import User
from periferia_social.models.post import Post
from periferia_social.models.like import Like

__all__ = ["User", "Post", "Like"]
