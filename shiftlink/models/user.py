"""User model."""

from sqlalchemy import Boolean, Column, String
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base


class User(Base):
    """User model for authentication."""

    __tablename__ = "users"

    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="student")  # student, employer, admin
    country = Column(String(100))
    language = Column(String(20))
    image = Column(String(500))
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    student = relationship("Student", back_populates="user", uselist=False, cascade="all, delete-orphan")
    employer = relationship("Employer", back_populates="user", uselist=False, cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
