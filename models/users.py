# models/users.py
from sqlalchemy import Column, String, DateTime, Index, func
from sqlalchemy_serializer import SerializerMixin
from .base import db


class User(db.Model, SerializerMixin):
    __tablename__ = "users"

    # Primary Key (Supabase auth user id, the JWT "sub" claim)
    id = Column(String, primary_key=True)

    # Basic Info
    full_name = Column(String(150), nullable=False, default="Student")
    email = Column(String(150), nullable=True, index=True)
    institution_name = Column(String(200), nullable=True)
    course_program = Column(String(200), nullable=True)
    avatar_url = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("ix_users_created_at", "created_at"),
    )

    serialize_only = (
        'id', 'full_name', 'email', 'institution_name',
        'course_program', 'avatar_url', 'created_at',
    )

    def __repr__(self):
        return f'<User {self.id}>'
