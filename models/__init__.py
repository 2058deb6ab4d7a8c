from .base import db, metadata
from .users import User
from .dating_profiles import DatingProfile
from .matches import Match
from .swipes import Swipe
from .wallets import Wallet
from .savings_goals import SavingsGoal
from .transactions import Transaction
from .wallet_sessions import WalletSession

__all__ = [
    'db',
    'metadata',
    'User',
    'DatingProfile',
    'Match',
    'Swipe',
    'Wallet',
    'SavingsGoal',
    'Transaction',
    'WalletSession',
]
