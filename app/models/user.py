# SQLAlchemy models

from sqlalchemy import Column, String
from app.models.base import Base


class User(Base):
    """Identity principal; rows mirror the external identity provider"""
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    name = Column(String(255), nullable=True)
    image = Column(String(1024), nullable=True)
