import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin
from sqlalchemy import CheckConstraint


def canonical_pair(user_a, user_b):
    """Order a pair of user ids the way dating_matches stores them"""
    return (user_a, user_b) if user_a < user_b else (user_b, user_a)


class Match(db.Model, SerializerMixin):
    __tablename__ = "dating_matches"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    user1_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    user2_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    
    # user1_id is always the smaller ID so the pair is unordered-unique
    __table_args__ = (
        db.UniqueConstraint('user1_id', 'user2_id', name='uq_match_pair'),
        CheckConstraint('user1_id < user2_id', name='user_order'),
        db.Index('idx_match_user2', 'user2_id'),
    )

    def involves(self, user_id):
        return user_id in (self.user1_id, self.user2_id)

    def partner_of(self, user_id):
        return self.user2_id if self.user1_id == user_id else self.user1_id
