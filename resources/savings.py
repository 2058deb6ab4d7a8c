import logging
import uuid
from middleware.auth import supabase_required
from flask_restful import Resource
from flask import request
from models import db
from utils.errors import KonnectError
from utils.profiles import get_or_create_user
from utils.response import (
    success_response,
    error_response,
    konnect_error_response,
    paginated_response
)
from utils.savings import (
    get_wallet,
    wallet_data,
    create_goal,
    list_goals,
    goal_data,
    deposit_to_goal,
    list_transactions,
    transaction_data
)
from utils.validators import format_cents

logger = logging.getLogger(__name__)


class WalletBalanceResource(Resource):
    """Balance of the in-app wallet that funds savings pockets"""

    @supabase_required
    def get(self):
        try:
            user = get_or_create_user(request.user)
            wallet = get_wallet(user.id)
            return success_response(wallet_data(wallet), "Wallet retrieved successfully")

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error fetching wallet: {str(e)}")
            return error_response("Failed to fetch wallet", 500)


class SavingsGoalsResource(Resource):
    """Resource for listing and creating savings goals"""

    @supabase_required
    def get(self):
        try:
            user_id = request.user.get('sub')
            goals = [goal_data(goal) for goal in list_goals(user_id)]

            return success_response(
                {'goals': goals, 'total': len(goals)},
                "Savings goals retrieved successfully"
            )

        except Exception as e:
            logger.error(f"Error fetching savings goals: {str(e)}")
            return error_response("Failed to fetch savings goals", 500)

    @supabase_required
    def post(self):
        try:
            data = request.get_json(silent=True)
            if not data:
                return error_response("No data provided", 400)

            user = get_or_create_user(request.user)
            goal = create_goal(
                user.id,
                data.get('name'),
                data.get('target_amount'),
                data.get('icon')
            )

            return success_response(
                goal_data(goal),
                f"{goal.name} savings goal created successfully",
                201
            )

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error creating savings goal: {str(e)}")
            return error_response("Failed to create savings goal", 500)


class SavingsDepositResource(Resource):
    """Move funds from the wallet into a goal"""

    @supabase_required
    def post(self, goal_id):
        try:
            user_id = request.user.get('sub')
            data = request.get_json(silent=True)

            if not data:
                return error_response("No data provided", 400)

            try:
                goal_uuid = uuid.UUID(goal_id)
            except ValueError:
                return error_response("Savings goal not found", 404)

            wallet, goal, transaction = deposit_to_goal(user_id, goal_uuid, data.get('amount'))

            return success_response(
                {
                    'wallet': wallet_data(wallet),
                    'goal': goal_data(goal),
                    'transaction': transaction_data(transaction)
                },
                f"R{format_cents(-transaction.amount_cents)} added to {goal.name}"
            )

        except KonnectError as e:
            return konnect_error_response(e)
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error adding funds: {str(e)}")
            return error_response("Failed to add funds", 500)


class TransactionsResource(Resource):
    """The caller's local transaction ledger"""

    @supabase_required
    def get(self):
        try:
            user_id = request.user.get('sub')
            page = request.args.get('page', type=int, default=1)
            per_page = request.args.get('per_page', type=int, default=20)

            if page < 1 or per_page < 1:
                return error_response("page and per_page must be positive", 400)

            pagination = list_transactions(user_id, page, per_page)
            return paginated_response(
                pagination,
                transaction_data,
                "Transactions retrieved successfully"
            )

        except Exception as e:
            logger.error(f"Error fetching transactions: {str(e)}")
            return error_response("Failed to fetch transactions", 500)
