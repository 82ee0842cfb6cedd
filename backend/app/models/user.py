"""
user.py — ORM Model for Application Users and Their Favorited Properties

Purpose:
- Represent registered users of the Neighborhood app.
- Store hashed passwords only — never raw.
- Record which (opaque, Zillow-style) property ids each user has favorited.

Design Notes:
- `username` is the external identity key: unique and never updated.
- `favorited_properties` is a plain join table with no identity of its own.
  The (user_id, property_zpid) pair is intentionally not unique, so a
  property favorited twice appears twice.
- Deleting a user cascades to their favorites.

Used by:
- services/users.py (UserRepository)
- core/database.py (create_all / drop_all)
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String, Table

from app.core.database import Base


favorited_properties = Table(
    "favorited_properties",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("property_zpid", BigInteger, nullable=False),
)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # Authentication fields
    username = Column(String(30), unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    # Profile
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=False)

    def __repr__(self):
        return f"<User {self.username}>"
