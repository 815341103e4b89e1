from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Text, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base


class DoctorStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DoctorSpecialty(Base):
    __tablename__ = "doctor_specialties"

    id = Column(Integer, primary_key=True, index=True)
    specialty_name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    doctors = relationship("Doctor", back_populates="specialty")
    purposes = relationship("Purpose", back_populates="specialty", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<DoctorSpecialty(id={self.id}, name='{self.specialty_name}')>"


class Purpose(Base):
    """A reason for a visit offered under a specialty, e.g. Prenatal."""

    __tablename__ = "purposes"

    id = Column(Integer, primary_key=True, index=True)
    specialty_id = Column(Integer, ForeignKey("doctor_specialties.id"), nullable=False)
    purpose_name = Column(String(100), nullable=False)

    specialty = relationship("DoctorSpecialty", back_populates="purposes")

    def __repr__(self):
        return f"<Purpose(id={self.id}, name='{self.purpose_name}')>"


class Doctor(Base):
    __tablename__ = "doctors"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(255), nullable=True)

    # Professional information
    specialization_id = Column(Integer, ForeignKey("doctor_specialties.id"), nullable=True)
    status = Column(SQLEnum(DoctorStatus), default=DoctorStatus.ACTIVE, nullable=False)

    # Contact information
    birthdate = Column(Date, nullable=True)
    address = Column(String(255), nullable=True)
    phone_number = Column(String(20), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    specialty = relationship("DoctorSpecialty", back_populates="doctors")
    schedules = relationship("Schedule", back_populates="doctor")
    appointments = relationship("Appointment", back_populates="doctor")

    @property
    def specialty_name(self):
        return self.specialty.specialty_name if self.specialty else None

    def __repr__(self):
        return f"<Doctor(id={self.id}, name='{self.name}', status='{self.status}')>"
