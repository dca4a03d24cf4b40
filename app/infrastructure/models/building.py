"""SQLAlchemy models for clients, buildings, apartments and tenants."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import storage_now

from ._ids import new_id


class ClientModel(Base):
    """Building manager account owning one or more buildings."""

    __tablename__ = "clients"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)
    name = Column(String(120), nullable=True)
    email = Column(String(255), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=storage_now)

    buildings = relationship("BuildingModel", back_populates="client")


class BuildingModel(Base):
    __tablename__ = "buildings"

    id = Column(String(36), primary_key=True, default=new_id)
    client_id = Column(String(36), ForeignKey("clients.id"), nullable=True, index=True)
    street_number = Column(String(20), nullable=True)
    street_address = Column(String(255), nullable=True)
    city = Column(String(120), nullable=True)

    client = relationship("ClientModel", back_populates="buildings")
    apartments = relationship("ApartmentModel", back_populates="building")


class ApartmentModel(Base):
    __tablename__ = "apartments"

    id = Column(String(36), primary_key=True, default=new_id)
    building_id = Column(String(36), ForeignKey("buildings.id"), nullable=False, index=True)
    apartment_number = Column(String(20), nullable=True)

    building = relationship("BuildingModel", back_populates="apartments")
    tenants = relationship("TenantModel", back_populates="apartment")


class TenantModel(Base):
    """Occupancy of an apartment by a user, with channel preferences."""

    __tablename__ = "tenants"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)
    apartment_id = Column(String(36), ForeignKey("apartments.id"), nullable=False, index=True)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    email = Column(String(255), nullable=True)
    phone_number = Column(String(40), nullable=True)
    email_opt_in = Column(Boolean, nullable=False, default=False)
    sms_opt_in = Column(Boolean, nullable=False, default=False)
    whatsapp_opt_in = Column(Boolean, nullable=False, default=False)
    viber_opt_in = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(), nullable=False, default=storage_now)

    apartment = relationship("ApartmentModel", back_populates="tenants")


__all__ = ["ClientModel", "BuildingModel", "ApartmentModel", "TenantModel"]
