from sqlalchemy import Column, Integer, String, Text
from ..database.core import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=False, unique=True, index=True)
    icon = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Category(slug='{self.slug}')>"
