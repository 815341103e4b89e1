"""
Clinic Appointment System

FastAPI service for a small clinic: patient, doctor and admin accounts,
booking against per-day AM/PM doctor capacity, a visit queue, and
announcements.
"""

__version__ = "1.0.0"
