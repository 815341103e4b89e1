from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime, Float, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base


class PrenatalInfo(Base):
    """Intake form filled in when booking a prenatal check-up."""

    __tablename__ = "prenatal_info"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=True)
    address = Column(String(255), nullable=True)
    occupation = Column(String(100), nullable=True)
    husband_name = Column(String(255), nullable=True)
    husband_age = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<PrenatalInfo(id={self.id}, name='{self.name}')>"


class ImmunizationInfo(Base):
    """Intake form for a child's immunization visit."""

    __tablename__ = "immunization_info"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    child_name = Column(String(255), nullable=False)
    birthdate = Column(Date, nullable=True)
    birthplace = Column(String(255), nullable=True)
    address = Column(String(255), nullable=True)
    mother_name = Column(String(255), nullable=True)
    father_name = Column(String(255), nullable=True)
    birth_height = Column(Float, nullable=True)
    birth_weight = Column(Float, nullable=True)
    sex = Column(String(10), nullable=True)
    health_center = Column(String(255), nullable=True)
    barangay = Column(String(255), nullable=True)
    family_number = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<ImmunizationInfo(id={self.id}, child_name='{self.child_name}')>"


class Patient(Base):
    """Clinical record behind an appointment; points at exactly one intake form."""

    __tablename__ = "patients"

    id = Column(Integer, primary_key=True, index=True)
    prenatal_id = Column(Integer, ForeignKey("prenatal_info.id"), nullable=True)
    immunization_id = Column(Integer, ForeignKey("immunization_info.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    prenatal_info = relationship("PrenatalInfo")
    immunization_info = relationship("ImmunizationInfo")
    vital_signs = relationship(
        "VitalSigns", back_populates="patient", order_by="VitalSigns.id"
    )
    diagnoses = relationship(
        "Diagnosis", back_populates="patient", order_by="Diagnosis.id"
    )

    def __repr__(self):
        return f"<Patient(id={self.id})>"


class VitalSigns(Base):
    __tablename__ = "patient_vital_signs"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    height = Column(String(20), nullable=True)
    weight = Column(String(20), nullable=True)
    bp = Column(String(20), nullable=True)
    blood_type = Column(String(10), nullable=True)
    prescription = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    patient = relationship("Patient", back_populates="vital_signs")


class Diagnosis(Base):
    __tablename__ = "patient_diagnosed"

    id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=True)
    diagnosis = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    patient = relationship("Patient", back_populates="diagnoses")
