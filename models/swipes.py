import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin

class Swipe(db.Model, SerializerMixin):
    __tablename__ = "dating_swipes"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    swiper_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    swiped_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    is_like = db.Column(db.Boolean, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    
    # One decision per pair, never about yourself
    __table_args__ = (
        db.UniqueConstraint('swiper_id', 'swiped_id', name='uq_swipe_pair'),
        db.CheckConstraint('swiper_id != swiped_id', name='no_self_swipe'),
        db.Index('idx_swiped_swiper_like', 'swiped_id', 'swiper_id', 'is_like'),
    )

    def __repr__(self):
        verdict = 'like' if self.is_like else 'pass'
        return f'<Swipe {self.swiper_id} -> {self.swiped_id} ({verdict})>'
