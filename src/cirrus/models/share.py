from sqlalchemy import Column, DateTime, String, func

from ..database import Base


class PublicShare(Base):
    """A file published without authentication, served by the server."""

    __tablename__ = "public_shares"

    id = Column(String, primary_key=True)
    file_path = Column(String, nullable=False)
    created = Column(DateTime, server_default=func.now(), nullable=False)
