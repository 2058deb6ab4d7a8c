import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin

class Wallet(db.Model, SerializerMixin):
    __tablename__ = "wallets"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    
    balance_cents = db.Column(db.Integer, nullable=False, default=0)  # in cents (1 ZAR = 100 cents)
    currency = db.Column(db.String(3), nullable=False, default='ZAR')
    
    # Timestamps
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())
    
    __table_args__ = (
        db.CheckConstraint('balance_cents >= 0', name='non_negative_balance'),
    )
