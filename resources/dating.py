import logging
import uuid
from middleware.auth import supabase_required
from flask_restful import Resource
from flask import request
from models import db
from utils.errors import KonnectError
from utils.profiles import get_or_create_user, create_dating_profile, update_dating_profile
from utils.response import success_response, error_response, konnect_error_response
from utils.swiping import (
    get_dating_profile,
    get_profile_feed,
    swipe,
    list_matches,
    get_match
)

logger = logging.getLogger(__name__)


class DatingProfileResource(Resource):
    """Resource for the caller's own dating profile"""

    @supabase_required
    def get(self):
        try:
            user_id = request.user.get('sub')

            profile = get_dating_profile(user_id)
            if not profile:
                return error_response(
                    "Dating profile not found",
                    404,
                    {'requires_profile': True}
                )

            return success_response(profile.summary(), "Dating profile retrieved")

        except Exception as e:
            logger.error(f"Error fetching dating profile: {str(e)}")
            return error_response("Failed to fetch dating profile", 500)

    @supabase_required
    def post(self):
        """Create the dating profile (once per user)"""
        try:
            data = request.get_json(silent=True)
            if not data:
                return error_response("No data provided", 400)

            user = get_or_create_user(request.user)
            profile = create_dating_profile(user.id, data)

            return success_response(
                profile.summary(),
                "Profile Created! Start swiping to find matches",
                201
            )

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating dating profile: {str(e)}")
            return error_response("Failed to create dating profile", 500)

    @supabase_required
    def patch(self):
        try:
            data = request.get_json(silent=True)
            if not data:
                return error_response("No data provided", 400)

            profile = update_dating_profile(request.user.get('sub'), data)
            return success_response(profile.summary(), "Dating profile updated")

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating dating profile: {str(e)}")
            return error_response("Failed to update dating profile", 500)


class DatingFeedResource(Resource):
    """Candidate profiles the caller has not swiped on yet"""

    @supabase_required
    def get(self):
        try:
            user_id = request.user.get('sub')
            limit = request.args.get('limit', type=int)

            feed = get_profile_feed(user_id, limit)

            if not feed:
                return success_response(
                    {'profiles': [], 'total': 0},
                    "No new profiles right now. Check back soon!"
                )

            return success_response(
                {'profiles': feed, 'total': len(feed)},
                f"Found {len(feed)} profiles"
            )

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            logger.error(f"Error loading feed: {str(e)}")
            return error_response("Failed to load profiles", 500)


class SwipeResource(Resource):
    """Resource for like/pass decisions"""

    @supabase_required
    def post(self):
        """
        Record a like or pass on a candidate.
        A like on someone who already liked you creates the match.
        """
        try:
            user_id = request.user.get('sub')
            data = request.get_json(silent=True)

            if not data:
                return error_response("No data provided", 400)

            swiped_id = data.get('swiped_id')
            is_like = data.get('is_like')

            if not swiped_id or not isinstance(is_like, bool):
                return error_response("swiped_id and a boolean is_like are required", 400)

            result = swipe(user_id, swiped_id, is_like)

            if result.is_match:
                partner = get_dating_profile(swiped_id)
                partner_name = partner.display_name if partner else "someone"
                message = f"It's a Match! You and {partner_name} matched!"
            elif is_like:
                message = "Like sent!"
            else:
                message = "Passed on this profile"

            return success_response(
                {
                    'swipe_id': str(result.swipe.id),
                    'swiped_id': swiped_id,
                    'is_like': result.swipe.is_like,
                    'is_match': result.is_match,
                    'match_id': str(result.match.id) if result.match else None
                },
                message,
                201
            )

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error recording swipe: {str(e)}")
            return error_response("Failed to record swipe", 500)


class DatingMatchesResource(Resource):
    """Resource for the caller's matches"""

    @supabase_required
    def get(self):
        try:
            user_id = request.user.get('sub')
            matches = list_matches(user_id)

            return success_response(
                {'matches': matches, 'total': len(matches)},
                "Matches retrieved successfully"
            )

        except Exception as e:
            logger.error(f"Error fetching matches: {str(e)}")
            return error_response("Failed to fetch matches", 500)


class DatingMatchDetailResource(Resource):
    """Resource for a single match"""

    @supabase_required
    def get(self, match_id):
        try:
            user_id = request.user.get('sub')

            try:
                match_uuid = uuid.UUID(match_id)
            except ValueError:
                return error_response("Match not found", 404)

            match_data = get_match(user_id, match_uuid)
            return success_response(match_data, "Match details retrieved successfully")

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            logger.error(f"Error fetching match details: {str(e)}")
            return error_response("Failed to fetch match details", 500)
