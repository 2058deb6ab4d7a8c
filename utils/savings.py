"""
Savings pockets: goals funded from the student's wallet balance.

Amounts are handled as integer cents (1 ZAR = 100 cents) so that debits,
credits and the ledger always add up exactly.
"""
import logging
from typing import Any, List, Optional, Tuple

from sqlalchemy import update

from models import db, Wallet, SavingsGoal, Transaction
from models.savings_goals import GOAL_ICONS
from utils.errors import InsufficientFundsError, NotFoundError, ValidationError
from utils.validators import parse_amount, format_cents

logger = logging.getLogger(__name__)

MAX_GOAL_NAME = 100


def get_wallet(user_id: str) -> Wallet:
    wallet = Wallet.query.filter_by(user_id=user_id).first()
    if wallet is None:
        raise NotFoundError("Wallet not found")
    return wallet


def wallet_data(wallet: Wallet) -> dict:
    return {
        'balance_cents': wallet.balance_cents,
        'balance': format_cents(wallet.balance_cents),
        'currency': wallet.currency,
    }


def goal_data(goal: SavingsGoal) -> dict:
    """Goal with progress, percentage capped at 100"""
    percentage = min(goal.current_amount_cents * 100.0 / goal.target_amount_cents, 100.0)
    remaining = max(goal.target_amount_cents - goal.current_amount_cents, 0)
    return {
        'id': str(goal.id),
        'name': goal.name,
        'icon': goal.icon,
        'color': goal.color,
        'target_amount': format_cents(goal.target_amount_cents),
        'current_amount': format_cents(goal.current_amount_cents),
        'remaining_amount': format_cents(remaining),
        'progress_percentage': round(percentage, 1),
        'created_at': goal.created_at.isoformat() if goal.created_at else None,
    }


def create_goal(user_id: str, name: Optional[str], target_amount: Any, icon: Optional[str] = None) -> SavingsGoal:
    """
    Create a savings goal starting at zero.

    Raises:
        ValidationError: Missing name, bad amount or unknown icon
    """
    name = (name or '').strip()
    if not name:
        raise ValidationError("Please fill in all fields")
    if len(name) > MAX_GOAL_NAME:
        raise ValidationError(f"Goal name must be at most {MAX_GOAL_NAME} characters")

    target_cents = parse_amount(target_amount)

    icon = icon or 'target'
    if icon not in GOAL_ICONS:
        raise ValidationError("Invalid icon", {'allowed': list(GOAL_ICONS)})

    goal = SavingsGoal(
        user_id=user_id,
        name=name,
        target_amount_cents=target_cents,
        current_amount_cents=0,
        icon=icon
    )
    db.session.add(goal)
    db.session.commit()

    logger.info(f"Savings goal '{name}' created for user {user_id}")
    return goal


def list_goals(user_id: str) -> List[SavingsGoal]:
    return SavingsGoal.query.filter_by(user_id=user_id)\
        .order_by(SavingsGoal.created_at.desc())\
        .all()


def get_goal(user_id: str, goal_id) -> SavingsGoal:
    goal = SavingsGoal.query.filter_by(id=goal_id, user_id=user_id).first()
    if goal is None:
        raise NotFoundError("Savings goal not found")
    return goal


def deposit_to_goal(user_id: str, goal_id, amount: Any) -> Tuple[Wallet, SavingsGoal, Transaction]:
    """
    Move money from the wallet into a savings goal.

    Debits the wallet, credits the goal and records a Savings transaction in
    one database transaction; if any write fails none of them persist.

    Args:
        user_id: Owner of both the wallet and the goal
        goal_id: Target goal
        amount: Rand amount (number or numeric string)

    Returns:
        (wallet, goal, transaction) as stored after the commit

    Raises:
        ValidationError: Bad amount, checked before touching the database
        NotFoundError: Unknown goal or wallet
        InsufficientFundsError: Balance lower than the amount
    """
    amount_cents = parse_amount(amount)
    goal = get_goal(user_id, goal_id)
    wallet = get_wallet(user_id)

    try:
        # Conditional debit so concurrent deposits can never overdraw
        debited = db.session.execute(
            update(Wallet)
            .where(Wallet.user_id == user_id, Wallet.balance_cents >= amount_cents)
            .values(balance_cents=Wallet.balance_cents - amount_cents)
        ).rowcount

        if debited == 0:
            raise InsufficientFundsError()

        db.session.execute(
            update(SavingsGoal)
            .where(SavingsGoal.id == goal.id)
            .values(current_amount_cents=SavingsGoal.current_amount_cents + amount_cents)
        )

        transaction = Transaction(
            user_id=user_id,
            type='Savings',
            amount_cents=-amount_cents,
            description=f"Added to savings goal: {goal.name}",
            status='completed'
        )
        db.session.add(transaction)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    db.session.refresh(wallet)
    db.session.refresh(goal)

    logger.info(f"Deposited R{format_cents(amount_cents)} into goal {goal.id} for user {user_id}")
    return wallet, goal, transaction


def list_transactions(user_id: str, page: int = 1, per_page: int = 20):
    """Paginated local ledger, newest first"""
    query = db.select(Transaction)\
        .where(Transaction.user_id == user_id)\
        .order_by(Transaction.created_at.desc(), Transaction.id)
    return db.paginate(query, page=page, per_page=per_page, max_per_page=100, error_out=False)


def transaction_data(transaction: Transaction) -> dict:
    return {
        'id': str(transaction.id),
        'type': transaction.type,
        'amount': format_cents(transaction.amount_cents),
        'amount_cents': transaction.amount_cents,
        'description': transaction.description,
        'status': transaction.status,
        'created_at': transaction.created_at.isoformat() if transaction.created_at else None,
    }
