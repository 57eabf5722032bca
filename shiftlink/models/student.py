"""Student model."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base


class Student(Base):
    """Student profile model."""

    __tablename__ = "students"

    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    bio = Column(Text)
    school = Column(String(255))
    major = Column(String(255))
    graduation_year = Column(Integer)
    skills = Column(JSON, default=list)  # ["Barista", "Excel", ...]
    availability = Column(String(255))
    resume = Column(String(500))  # URL or stored filename

    # Work permit
    visa_type = Column(String(50))
    work_hours_limit = Column(Integer)  # hours per week allowed by the visa

    # Relationships
    user = relationship("User", back_populates="student")
    applications = relationship("Application", back_populates="student", cascade="all, delete")
    reviews = relationship("Review", back_populates="student", passive_deletes=True)

    def __repr__(self):
        return f"<Student {self.user_id}>"
