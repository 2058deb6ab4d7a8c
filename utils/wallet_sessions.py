import logging
from typing import Optional

from models import db, WalletSession
from utils.wallet_api import WalletTokens, utc_now

logger = logging.getLogger(__name__)


def store_session(user_id: str, phone_number: str, tokens: WalletTokens,
                  customer_id: Optional[str] = None) -> WalletSession:
    """Create or refresh the wallet session of a user"""
    now = utc_now()
    session = WalletSession.query.filter_by(user_id=user_id).first()
    if session is None:
        session = WalletSession(user_id=user_id)
        db.session.add(session)

    session.phone_number = phone_number
    session.customer_id = customer_id or session.customer_id
    session.access_token = tokens.access_token
    session.refresh_token = tokens.refresh_token
    session.access_token_expires_at = tokens.access_expires_at(now)
    session.refresh_token_expires_at = tokens.refresh_expires_at(now)
    session.is_active = True
    session.last_refreshed_at = now

    db.session.commit()
    logger.info(f"Stored wallet session for user {user_id}")
    return session


def get_active_session(user_id: str) -> Optional[WalletSession]:
    """The user's session if active and its access token has not expired"""
    session = WalletSession.query.filter_by(user_id=user_id, is_active=True).first()
    if session is None:
        return None

    expires_at = session.access_token_expires_at
    if expires_at is not None and expires_at <= utc_now():
        logger.info(f"Wallet session for user {user_id} expired")
        deactivate_session(user_id)
        return None
    return session


def deactivate_session(user_id: str) -> bool:
    updated = WalletSession.query.filter_by(user_id=user_id, is_active=True)\
        .update({'is_active': False})
    db.session.commit()
    if updated:
        logger.info(f"Deactivated wallet session for user {user_id}")
    return bool(updated)
