"""Database models."""

# Import all models in dependency order to ensure proper relationship initialization

# Base models (no foreign keys)
from shiftlink.models.user import User
from shiftlink.models.analytics import AnalyticsSnapshot
from shiftlink.models.waitlist import WaitlistEntry

# Models with foreign keys to base models
from shiftlink.models.student import Student
from shiftlink.models.employer import Employer
from shiftlink.models.job import Job
from shiftlink.models.verification_request import VerificationRequest

# Models with foreign keys to other models
from shiftlink.models.application import Application
from shiftlink.models.review import Review

# Export all models
__all__ = [
    "User",
    "AnalyticsSnapshot",
    "WaitlistEntry",
    "Student",
    "Employer",
    "Job",
    "VerificationRequest",
    "Application",
    "Review",
]
