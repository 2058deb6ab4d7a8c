import uuid
from sqlalchemy import Uuid
from .base import db
from sqlalchemy_serializer import SerializerMixin

class WalletSession(db.Model, SerializerMixin):
    __tablename__ = "wallet_sessions"
    
    id = db.Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = db.Column(db.String, db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)
    
    # Wallet API identity
    phone_number = db.Column(db.String(20), nullable=False, index=True)
    customer_id = db.Column(db.String(100), nullable=True)
    
    # Token pair issued by customer/login
    access_token = db.Column(db.Text, nullable=False)
    refresh_token = db.Column(db.Text, nullable=True)
    access_token_expires_at = db.Column(db.DateTime, nullable=True)
    refresh_token_expires_at = db.Column(db.DateTime, nullable=True)
    
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    last_refreshed_at = db.Column(db.DateTime, nullable=True)
    
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())

    # Tokens never leave the server
    serialize_rules = ('-access_token', '-refresh_token')
