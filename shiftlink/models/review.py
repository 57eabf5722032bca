"""Review model."""

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from shiftlink.db.base import Base


class Review(Base):
    """
    Two-sided review of a completed application.

    The student half (student_rating/comment/reviewed_at) is written by the
    student about the employer; the employer half is written by the employer
    about the student. Each half stays NULL until its author submits it.
    """

    __tablename__ = "reviews"

    application_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("applications.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    student_id = Column(Uuid(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    employer_id = Column(Uuid(as_uuid=True), ForeignKey("employers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Student -> employer
    student_rating = Column(Float)
    student_comment = Column(Text)
    student_reviewed_at = Column(DateTime)

    # Employer -> student
    employer_rating = Column(Float)
    employer_comment = Column(Text)
    employer_reviewed_at = Column(DateTime)

    # Moderation
    is_flagged = Column(Boolean, default=False, nullable=False)
    flag_reason = Column(Text)

    # Relationships
    application = relationship("Application", back_populates="review")
    student = relationship("Student", back_populates="reviews")
    employer = relationship("Employer", back_populates="reviews")

    def __repr__(self):
        return f"<Review {self.application_id}>"
