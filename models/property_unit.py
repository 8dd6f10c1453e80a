# models/property_unit.py
from sqlalchemy import Column, Integer, String, Numeric, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class PropertyUnit(TimestampMixin, Base):
     """
     PropertyUnit model - individual rentable unit within a property.
     """
     __tablename__ = "property_units"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)

     unit_number = Column(String(50), nullable=False)
     monthly_rent = Column(Numeric(12, 2), nullable=True)
     deposit = Column(Numeric(12, 2), nullable=True)
     is_available = Column(Boolean, default=True, nullable=False)

     # Relationships
     property = relationship("Property", back_populates="units")
     leases = relationship("Lease", back_populates="unit")

     def __repr__(self):
          return f"<PropertyUnit(id={self.id}, unit_number='{self.unit_number}')>"
