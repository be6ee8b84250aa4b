# storefront/data/models/category.py
from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")

    products = relationship("ProductModel", back_populates="category")
