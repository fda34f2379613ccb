"""
SQLAlchemy ORM models for Form Architect.

Forms and their scored submissions.
"""

from datetime import datetime

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, ForeignKey, JSON, Index,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    pass


class Form(Base):
    __tablename__ = "forms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    fields_json = Column(JSON, default=list)
    settings_json = Column(JSON, default=dict)
    template_id = Column(String(64), nullable=True, index=True)  # set when installed from a template
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    submissions = relationship("Submission", back_populates="form", cascade="all, delete-orphan")


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(Integer, ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    data_json = Column(JSON, default=dict)
    lead_score = Column(Integer, default=0)
    spam_score = Column(Integer, default=0)
    marked_spam = Column(Boolean, default=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(String(512), nullable=True)
    auto_response_sent = Column(Boolean, default=False)
    submitted_at = Column(DateTime, default=datetime.utcnow)

    form = relationship("Form", back_populates="submissions")

    __table_args__ = (
        Index("ix_sub_ip_time", "ip_address", "submitted_at"),
        Index("ix_sub_form_time", "form_id", "submitted_at"),
    )
