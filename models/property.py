# models/property.py
from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Property(TimestampMixin, Base):
     """
     Property model - a building or compound owned by a landlord.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     landlord_id = Column(Integer, nullable=True, index=True)
     address = Column(String(255), nullable=True)
     city = Column(String(100), nullable=True)
     description = Column(Text, nullable=True)

     # Relationships
     units = relationship("PropertyUnit", back_populates="property", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Property(id={self.id}, name='{self.name}')>"
