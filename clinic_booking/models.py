from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never reused after a delete

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    contact = Column(String(20), nullable=False)  # 10 digits, validated before insert
    date = Column(Date, nullable=False, index=True)
    time = Column(String(5), nullable=False)  # HH:MM slot label
    reason = Column(String(500), nullable=True)
    status = Column(
        String(20), nullable=False, default="Pending", server_default="Pending"
    )  # Pending, Approved, Cancelled, Done
    created_at = Column(DateTime, server_default=func.now())

    feedback = relationship("Feedback", back_populates="appointment", passive_deletes=True)


class Feedback(Base):
    __tablename__ = "feedback"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    # Weak link - feedback outlives the appointment it was left for
    appointment_id = Column(
        Integer, ForeignKey("appointments.id", ondelete="SET NULL"), nullable=True, index=True
    )
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    appointment = relationship("Appointment", back_populates="feedback")
