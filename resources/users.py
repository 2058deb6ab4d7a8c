import logging
from middleware.auth import supabase_required
from flask_restful import Resource
from flask import request
from models import db
from utils.errors import KonnectError
from utils.profiles import get_or_create_user, update_user
from utils.response import success_response, error_response, konnect_error_response

logger = logging.getLogger(__name__)


class CurrentUserResource(Resource):
    """Resource for the current authenticated student"""

    @supabase_required
    def get(self):
        """Get current user, creating the user and wallet on first call"""
        try:
            user = get_or_create_user(request.user)
            return success_response(user.to_dict(), "User retrieved successfully")

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error fetching current user: {str(e)}")
            return error_response("Failed to fetch user", 500)

    @supabase_required
    def patch(self):
        """Update name, institution, course or avatar"""
        try:
            data = request.get_json(silent=True)

            if not data or not isinstance(data, dict):
                return error_response("No data provided", 400)

            user = get_or_create_user(request.user)
            user = update_user(user, data)

            return success_response(user.to_dict(), "Profile updated successfully")

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error updating user: {str(e)}")
            return error_response("Failed to update profile", 500)
