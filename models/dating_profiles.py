import uuid
from sqlalchemy import Column, String, Integer, Text, DateTime, Uuid, func, Index, JSON
from sqlalchemy_serializer import SerializerMixin
from .base import db

LOOKING_FOR_OPTIONS = ('friendship', 'relationship', 'casual', 'networking')


class DatingProfile(db.Model, SerializerMixin):
    __tablename__ = "dating_profiles"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # Foreign Key to User, one dating profile per student
    user_id = Column(String, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)

    # Profile Information
    display_name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    bio = Column(Text, nullable=True)
    interests = Column(JSON, nullable=True)  # List of interest strings
    photo_url = Column(String(500), nullable=True)
    institution = Column(String(200), nullable=True)
    course = Column(String(200), nullable=True)
    looking_for = Column(
        db.Enum(*LOOKING_FOR_OPTIONS, name='looking_for'),
        nullable=False,
        default='friendship'
    )

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_dating_profile_created", "created_at"),
        Index("idx_dating_profile_institution", "institution"),
    )

    def summary(self):
        """Public card shown in the feed and on match lists"""
        return {
            'user_id': self.user_id,
            'display_name': self.display_name,
            'age': self.age,
            'bio': self.bio,
            'interests': self.interests or [],
            'photo_url': self.photo_url,
            'institution': self.institution,
            'course': self.course,
            'looking_for': self.looking_for,
        }

    def __repr__(self):
        return f'<DatingProfile {self.user_id}>'
