import logging
from functools import wraps
from middleware.auth import supabase_required
from flask_restful import Resource
from flask import request, current_app
from pydantic import ValidationError as PydanticValidationError
from models import db
from utils.errors import KonnectError, WalletAPIError
from utils.profiles import get_or_create_user
from utils.response import success_response, error_response, konnect_error_response
from utils.wallet_api import (
    WalletAPIClient,
    WalletRegistration,
    DocumentUpload,
    VoucherItem
)
from utils.wallet_sessions import store_session, get_active_session, deactivate_session

logger = logging.getLogger(__name__)

WALLET_LOGIN_DETAILS = {'requires_wallet_login': True}


def wallet_errors(f):
    """
    Map Wallet API failures to responses.

    An unauthorized answer ends the stored wallet session and tells the
    client to send the student back to the wallet login.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except WalletAPIError as e:
            if e.is_unauthorized:
                deactivate_session(request.user.get('sub'))
                return error_response(e.message, 401, WALLET_LOGIN_DETAILS)
            return error_response(e.message, e.status_code, {'result_code': e.result_code})
        except PydanticValidationError as e:
            return error_response(
                "Invalid request data",
                400,
                {'errors': e.errors(include_url=False, include_context=False, include_input=False)}
            )
        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Wallet request failed: {str(e)}")
            return error_response("Wallet request failed", 500)

    return decorated


def session_client():
    """Client carrying the caller's stored wallet token"""
    session = get_active_session(request.user.get('sub'))
    if session is None:
        raise WalletAPIError("Please log in to your wallet", 401)
    return WalletAPIClient.from_config(current_app.config, access_token=session.access_token)


class WalletLoginResource(Resource):

    @supabase_required
    @wallet_errors
    def post(self):
        """Log in to the Wallet API and keep the session server side"""
        data = request.get_json(silent=True) or {}
        phone_number = (data.get('phone_number') or '').strip()
        pin = str(data.get('pin') or '').strip()

        if not phone_number or not pin:
            return error_response("phone_number and pin are required", 400)

        user = get_or_create_user(request.user)
        client = WalletAPIClient.from_config(current_app.config)
        tokens = client.login(phone_number, pin)

        session = store_session(user.id, phone_number, tokens, data.get('customer_id'))

        return success_response(
            {
                'phone_number': session.phone_number,
                'customer_id': session.customer_id,
                'access_token_expires_at': session.access_token_expires_at.isoformat()
            },
            "Wallet login successful"
        )


class WalletLogoutResource(Resource):

    @supabase_required
    @wallet_errors
    def post(self):
        ended = deactivate_session(request.user.get('sub'))
        return success_response({'logged_out': ended}, "You have been logged out successfully")


class WalletAPIBalanceResource(Resource):

    @supabase_required
    @wallet_errors
    def get(self):
        balance = session_client().get_balance()
        return success_response(balance.model_dump(), "Balance retrieved successfully")


class WalletAPITransactionsResource(Resource):

    @supabase_required
    @wallet_errors
    def get(self):
        limit = request.args.get('limit', type=int, default=50)
        offset = request.args.get('offset', type=int, default=0)

        if limit < 1 or offset < 0:
            return error_response("limit must be positive and offset not negative", 400)

        transactions = session_client().get_transactions(limit=min(limit, 100), offset=offset)
        return success_response(
            {'transactions': [t.model_dump() for t in transactions], 'total': len(transactions)},
            "Transactions retrieved successfully"
        )


class WalletAPIVouchersResource(Resource):

    @supabase_required
    @wallet_errors
    def get(self):
        vouchers = session_client().get_vouchers()
        return success_response(
            {'vouchers': [v.model_dump() for v in vouchers], 'total': len(vouchers)},
            "Vouchers retrieved successfully"
        )


class WalletAPIProfileResource(Resource):

    @supabase_required
    @wallet_errors
    def get(self):
        profile = session_client().get_profile()
        return success_response(profile.model_dump(), "Wallet profile retrieved successfully")


class WalletRegisterResource(Resource):

    @supabase_required
    @wallet_errors
    def post(self):
        data = request.get_json(silent=True)
        if not data:
            return error_response("No data provided", 400)

        registration = WalletRegistration.model_validate(data)
        if not (registration.privacy and registration.gtc):
            return error_response(
                "Please agree to the Privacy Policy and Terms & Conditions", 400
            )

        # The Wallet API expects names in upper case
        registration = registration.model_copy(update={
            'first_name': registration.first_name.upper(),
            'last_name': registration.last_name.upper(),
            'middle_name': registration.middle_name.upper(),
        })

        client = WalletAPIClient.from_config(current_app.config)
        envelope = client.register(registration)
        return success_response(envelope.data, envelope.messages or "Your account has been created", 201)


class WalletDocumentResource(Resource):

    @supabase_required
    @wallet_errors
    def post(self):
        """Upload an identity document or selfie (base64)"""
        data = request.get_json(silent=True)
        if not data:
            return error_response("No data provided", 400)

        document = DocumentUpload.model_validate(data)
        envelope = session_client().upload_document(document)
        return success_response(envelope.data, envelope.messages or "Document uploaded successfully")


class WalletVoucherPurchaseResource(Resource):

    @supabase_required
    @wallet_errors
    def post(self):
        data = request.get_json(silent=True)
        if not data:
            return error_response("No data provided", 400)

        items = [VoucherItem.model_validate(item) for item in data.get('items') or []]
        merchant = data.get('merchant')
        if not items or not merchant:
            return error_response("items and merchant are required", 400)

        total = sum(item.amount * item.quantity for item in items)
        envelope = session_client().create_voucher_payment_intent(
            items,
            merchant,
            f"{total:.2f}",
            data.get('mode', 'strict')
        )
        logger.info(f"Voucher purchase of R{total:.2f} for user {request.user.get('sub')}")
        return success_response(envelope.data, envelope.messages or "Purchase Successful")
