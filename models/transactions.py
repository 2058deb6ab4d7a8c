import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin

class Transaction(db.Model, SerializerMixin):
    __tablename__ = "transactions"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    
    type = db.Column(db.String(50), nullable=False)  # Savings, Deposit, Airtime, ...
    amount_cents = db.Column(db.Integer, nullable=False)  # negative for money leaving the wallet
    description = db.Column(db.String(255), nullable=True)
    status = db.Column(db.Enum('pending', 'completed', 'failed', name='transaction_status'),
                      nullable=False, default='completed')
    
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    
    __table_args__ = (
        db.Index('idx_transactions_user_created', 'user_id', 'created_at'),
    )
