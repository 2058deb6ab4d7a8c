import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin

GOAL_ICONS = ('laptop', 'smartphone', 'plane', 'book', 'home', 'target')


class SavingsGoal(db.Model, SerializerMixin):
    __tablename__ = "savings_goals"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    
    # Goal details
    name = db.Column(db.String(100), nullable=False)
    target_amount_cents = db.Column(db.Integer, nullable=False)
    current_amount_cents = db.Column(db.Integer, nullable=False, default=0)
    icon = db.Column(db.String(20), nullable=False, default='target')
    color = db.Column(db.String(50), nullable=False, default='from-primary to-accent')
    
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())
    
    __table_args__ = (
        db.Index('idx_savings_goals_user', 'user_id', 'created_at'),
        db.CheckConstraint('target_amount_cents > 0', name='positive_target'),
    )
