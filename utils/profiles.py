import logging
from typing import Any, Dict

from sqlalchemy.exc import IntegrityError

from models import db, User, DatingProfile, Wallet
from utils.cache import CacheManager
from utils.errors import ConflictError, ProfileRequiredError, ValidationError
from utils.validators import validate_dating_profile

logger = logging.getLogger(__name__)

USER_FIELDS = ('full_name', 'institution_name', 'course_program', 'avatar_url')


def get_or_create_user(claims: Dict[str, Any]) -> User:
    """
    Load the user behind a validated JWT, creating the user and an empty
    wallet on first sight.
    """
    user_id = claims['sub']
    user = db.session.get(User, user_id)
    if user is not None:
        return user

    metadata = claims.get('user_metadata') or {}
    user = User(
        id=user_id,
        email=claims.get('email'),
        full_name=metadata.get('full_name') or metadata.get('name') or 'Student',
        avatar_url=metadata.get('avatar_url'),
    )
    try:
        db.session.add(user)
        # Flush to ensure user is in database before creating wallet
        db.session.flush()
        db.session.add(Wallet(user_id=user.id, balance_cents=0))
        db.session.commit()
    except IntegrityError:
        # Another request created the same user first
        db.session.rollback()
        return db.session.get(User, user_id)

    logger.info(f"Created user {user_id} with wallet")
    return user


def update_user(user: User, data: Dict[str, Any]) -> User:
    """
    Apply the editable account fields present in data.

    Raises:
        ValidationError: A field is not a string, or full_name is blank
    """
    updates = {}
    for field in USER_FIELDS:
        if field not in data:
            continue
        value = data[field]
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        value = (value or '').strip()
        if field == 'full_name' and not value:
            raise ValidationError("full_name cannot be empty")
        updates[field] = value or None

    for field, value in updates.items():
        setattr(user, field, value)

    db.session.commit()
    logger.info(f"Updated user {user.id}")
    return user


def create_dating_profile(user_id: str, data: Dict[str, Any]) -> DatingProfile:
    """
    Create the caller's dating profile.

    Raises:
        ValidationError: Invalid payload, nothing is written
        ConflictError: The user already has a dating profile
    """
    fields = validate_dating_profile(data)

    if DatingProfile.query.filter_by(user_id=user_id).first() is not None:
        raise ConflictError("Dating profile already exists")

    profile = DatingProfile(user_id=user_id, **fields)
    db.session.add(profile)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError("Dating profile already exists")

    logger.info(f"Created dating profile for user {user_id}")
    return profile


def update_dating_profile(user_id: str, data: Dict[str, Any]) -> DatingProfile:
    fields = validate_dating_profile(data, partial=True)

    profile = DatingProfile.query.filter_by(user_id=user_id).first()
    if profile is None:
        raise ProfileRequiredError()

    for field, value in fields.items():
        setattr(profile, field, value)

    db.session.commit()
    logger.info(f"Updated dating profile for user {user_id}")

    # Other swipers' cached feeds expire on their own TTL
    CacheManager.invalidate_user_cache(user_id)
    return profile
