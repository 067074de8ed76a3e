"""
Declarative base shared by every ORM model.

Models import Base from here rather than from app.core.database so the
engine is never built as a side effect of importing a model.
"""
from sqlalchemy.orm import declarative_base

Base = declarative_base()
