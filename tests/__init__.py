"""
Test suite for the Clinic Appointment System.

Integration tests run the FastAPI app against a throwaway SQLite database.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"
