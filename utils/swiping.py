"""
Swipe and match workflow for the dating feature.

A swipe is a one-way like/pass decision. A match is created once both
directions of "like" exist, with at most one row per unordered pair.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from models import db, DatingProfile, Match, Swipe
from models.matches import canonical_pair
from utils.cache import (
    CacheManager,
    build_feed_cache_key,
    build_matches_list_cache_key,
    CACHE_TTL_SHORT
)
from utils.errors import (
    AlreadySwipedError,
    ForbiddenError,
    NotFoundError,
    ProfileRequiredError,
    ValidationError
)

logger = logging.getLogger(__name__)

FEED_PAGE_SIZE = 20

_UPSERT_DIALECTS = {
    'postgresql': postgresql.insert,
    'sqlite': sqlite.insert,
}


@dataclass
class SwipeResult:
    swipe: Swipe
    match: Optional[Match] = None
    match_created: bool = False

    @property
    def is_match(self) -> bool:
        return self.match is not None


def get_dating_profile(user_id: str) -> Optional[DatingProfile]:
    return DatingProfile.query.filter_by(user_id=user_id).first()


def require_dating_profile(user_id: str) -> DatingProfile:
    profile = get_dating_profile(user_id)
    if profile is None:
        raise ProfileRequiredError()
    return profile


def record_swipe(swiper_id: str, swiped_id: str, is_like: bool) -> Swipe:
    """
    Insert one like/pass decision and commit it.

    Raises:
        ValidationError: Swiping on yourself
        ProfileRequiredError: The swiper has no dating profile
        NotFoundError: The candidate has no dating profile
        AlreadySwipedError: The pair was already decided on
    """
    if swiper_id == swiped_id:
        raise ValidationError("You cannot swipe on yourself")

    require_dating_profile(swiper_id)
    if get_dating_profile(swiped_id) is None:
        raise NotFoundError("Profile not found")

    swipe = Swipe(swiper_id=swiper_id, swiped_id=swiped_id, is_like=bool(is_like))
    db.session.add(swipe)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info(f"Duplicate swipe rejected: {swiper_id} -> {swiped_id}")
        raise AlreadySwipedError(swiper_id, swiped_id)

    logger.info(f"Swipe recorded: {swiper_id} -> {swiped_id} ({'like' if swipe.is_like else 'pass'})")
    return swipe


def find_reverse_like(swiper_id: str, swiped_id: str) -> Optional[Swipe]:
    """Return swiped_id's like of swiper_id, if it exists"""
    return Swipe.query.filter_by(
        swiper_id=swiped_id,
        swiped_id=swiper_id,
        is_like=True
    ).first()


def create_match(user_a: str, user_b: str) -> Tuple[Match, bool]:
    """
    Insert the match for an unordered pair unless it already exists.

    The insert carries ON CONFLICT DO NOTHING on (user1_id, user2_id), so
    two concurrent callers still end with a single row.

    Returns:
        (match, created) where created is False if the row already existed
    """
    user1_id, user2_id = canonical_pair(user_a, user_b)

    dialect = db.session.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Unsupported database dialect for match upsert: {dialect}")

    stmt = insert(Match.__table__).values(
        user1_id=user1_id,
        user2_id=user2_id
    ).on_conflict_do_nothing(index_elements=['user1_id', 'user2_id'])

    try:
        created = db.session.execute(stmt).rowcount == 1
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    match = Match.query.filter_by(user1_id=user1_id, user2_id=user2_id).one()

    if created:
        logger.info(f"Match created between {user1_id} and {user2_id}")
    else:
        logger.info(f"Match between {user1_id} and {user2_id} already existed")

    return match, created


def swipe(swiper_id: str, swiped_id: str, is_like: bool) -> SwipeResult:
    """
    Record a swipe and, for a like, create the match if the like is mutual.

    The swipe is committed before the reverse like is looked up. Whichever
    of two reciprocal swipes commits last is guaranteed to see the other.
    """
    recorded = record_swipe(swiper_id, swiped_id, is_like)
    result = SwipeResult(swipe=recorded)

    if recorded.is_like and find_reverse_like(swiper_id, swiped_id) is not None:
        result.match, result.match_created = create_match(swiper_id, swiped_id)

    CacheManager.invalidate_user_cache(swiper_id)
    if result.is_match:
        CacheManager.invalidate_user_cache(swiped_id)

    return result


def count_swipes(swiper_id: str) -> int:
    return Swipe.query.filter_by(swiper_id=swiper_id).count()


def get_profile_feed(swiper_id: str, limit: Optional[int] = None) -> List[dict]:
    """
    Fetch candidate profiles the swiper has not decided on yet.

    Args:
        swiper_id: The authenticated swiper
        limit: Page size, clamped to 1..FEED_PAGE_SIZE (config)

    Returns:
        Up to `limit` profile summaries, never the swiper's own and never one
        already swiped
    """
    require_dating_profile(swiper_id)
    page_size = current_app.config.get('FEED_PAGE_SIZE', FEED_PAGE_SIZE)
    limit = page_size if limit is None else max(1, min(int(limit), page_size))

    cache_key = build_feed_cache_key(swiper_id, limit)
    cached_feed = CacheManager.get(cache_key)
    if cached_feed is not None:
        logger.debug(f"Cache HIT for feed - user: {swiper_id}")
        return cached_feed

    already_swiped = select(Swipe.swiped_id).where(Swipe.swiper_id == swiper_id)

    profiles = DatingProfile.query.filter(
        DatingProfile.user_id != swiper_id,
        DatingProfile.user_id.not_in(already_swiped)
    ).order_by(
        DatingProfile.created_at.desc(),
        DatingProfile.user_id
    ).limit(limit).all()

    feed = [profile.summary() for profile in profiles]
    CacheManager.set(cache_key, feed, ttl=CACHE_TTL_SHORT)
    logger.info(f"Built feed of {len(feed)} profiles for user {swiper_id}")
    return feed


def _match_data(match: Match, user_id: str) -> dict:
    partner_id = match.partner_of(user_id)
    partner = get_dating_profile(partner_id)
    return {
        'match_id': str(match.id),
        'partner_id': partner_id,
        'partner': partner.summary() if partner else None,
        'matched_at': match.created_at.isoformat() if match.created_at else None,
    }


def list_matches(user_id: str) -> List[dict]:
    """All matches of a user, newest first, with the partner's card"""
    cache_key = build_matches_list_cache_key(user_id)
    cached_matches = CacheManager.get(cache_key)
    if cached_matches is not None:
        return cached_matches

    matches = Match.query.filter(
        db.or_(
            Match.user1_id == user_id,
            Match.user2_id == user_id
        )
    ).order_by(Match.created_at.desc()).all()

    matches_data = [_match_data(match, user_id) for match in matches]
    CacheManager.set(cache_key, matches_data, ttl=CACHE_TTL_SHORT)
    return matches_data


def get_match(user_id: str, match_id) -> dict:
    """
    One match by id, visible only to its two users.

    Raises:
        NotFoundError: No such match
        ForbiddenError: The user is not part of the match
    """
    match = db.session.get(Match, match_id)
    if match is None:
        raise NotFoundError("Match not found")
    if not match.involves(user_id):
        raise ForbiddenError("You are not part of this match")
    return _match_data(match, user_id)
