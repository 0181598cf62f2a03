"""
Declarative base for ORM models
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
