# models/tenant.py
from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class Tenant(TimestampMixin, Base):
     """
     Tenant model - the party billed by one or more leases.
     """
     __tablename__ = "tenants"

     tenant_id = Column(Integer, primary_key=True, autoincrement=True)
     first_name = Column(String(100), nullable=False)
     last_name = Column(String(100), nullable=False)
     email = Column(String(255), nullable=False)
     phone = Column(String(50), nullable=True)
     is_active = Column(Boolean, default=True, nullable=False)

     # Relationships
     leases = relationship("Lease", back_populates="tenant")

     def __repr__(self):
          return f"<Tenant(tenant_id={self.tenant_id}, name='{self.first_name} {self.last_name}')>"

     @property
     def full_name(self) -> str:
          return f"{self.first_name} {self.last_name}"
