from sqlalchemy import Column, String

from ..database import Base


class User(Base):
    """SQLAlchemy model for users allowed to access the server."""

    __tablename__ = "users"

    name = Column(String, primary_key=True)
    password_hash = Column(String, nullable=False)

    def __repr__(self) -> str:
        return f"User(name={self.name!r})"
