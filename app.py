from flask import Flask
from flask_cors import CORS
from flask_restful import Api, Resource
from flask_migrate import Migrate
from models import db
from dotenv import load_dotenv
from utils.cache import init_cache
import os
import logging

load_dotenv()

migrate = Migrate()


class HealthCheck(Resource):
    def get(self):
        return {"status": "ok"}


def create_app(config_overrides=None):
    app = Flask(__name__)

    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', 'sqlite:///konnect.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Supabase auth
    app.config['SUPABASE_JWT_SECRET'] = os.getenv('SUPABASE_JWT_SECRET')
    app.config['SUPABASE_JWT_AUDIENCE'] = os.getenv('SUPABASE_JWT_AUDIENCE', 'authenticated')

    # Wallet API
    app.config['WALLET_API_URL'] = os.getenv('WALLET_API_URL', 'https://api.wallet.example.com/')
    app.config['WALLET_CLIENT_KEY'] = os.getenv('WALLET_CLIENT_KEY', '')
    app.config['WALLET_CLIENT_PASS'] = os.getenv('WALLET_CLIENT_PASS', '')
    app.config['WALLET_API_TIMEOUT'] = int(os.getenv('WALLET_API_TIMEOUT', 15))

    app.config['REDIS_URL'] = os.getenv('REDIS_URL', '')
    app.config['FEED_PAGE_SIZE'] = int(os.getenv('FEED_PAGE_SIZE', 20))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config_overrides:
        app.config.update(config_overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s %(message)s'
    )

    CORS(app)

    db.init_app(app)
    migrate.init_app(app, db)
    init_cache(app)

    api = Api(app)
    api.add_resource(HealthCheck, '/health')

    from resources.users import CurrentUserResource
    from resources.dating import (
        DatingProfileResource,
        DatingFeedResource,
        SwipeResource,
        DatingMatchesResource,
        DatingMatchDetailResource
    )
    from resources.savings import (
        WalletBalanceResource,
        SavingsGoalsResource,
        SavingsDepositResource,
        TransactionsResource
    )
    from resources.wallet import (
        WalletLoginResource,
        WalletLogoutResource,
        WalletAPIBalanceResource,
        WalletAPITransactionsResource,
        WalletAPIVouchersResource,
        WalletAPIProfileResource,
        WalletRegisterResource,
        WalletDocumentResource,
        WalletVoucherPurchaseResource
    )

    api.add_resource(CurrentUserResource, '/users/me')

    # Dating routes
    api.add_resource(DatingProfileResource, '/dating/profile')
    api.add_resource(DatingFeedResource, '/dating/feed')
    api.add_resource(SwipeResource, '/dating/swipes')
    api.add_resource(DatingMatchesResource, '/dating/matches')
    api.add_resource(DatingMatchDetailResource, '/dating/matches/<string:match_id>')

    # Savings pockets and local ledger
    api.add_resource(WalletBalanceResource, '/savings/wallet')
    api.add_resource(SavingsGoalsResource, '/savings/goals')
    api.add_resource(SavingsDepositResource, '/savings/goals/<string:goal_id>/deposit')
    api.add_resource(TransactionsResource, '/transactions')

    # Wallet API routes
    api.add_resource(WalletLoginResource, '/wallet/login')
    api.add_resource(WalletLogoutResource, '/wallet/logout')
    api.add_resource(WalletAPIBalanceResource, '/wallet/balance')
    api.add_resource(WalletAPITransactionsResource, '/wallet/transactions')
    api.add_resource(WalletAPIVouchersResource, '/wallet/vouchers')
    api.add_resource(WalletAPIProfileResource, '/wallet/profile')
    api.add_resource(WalletRegisterResource, '/wallet/register')
    api.add_resource(WalletDocumentResource, '/wallet/documents')
    api.add_resource(WalletVoucherPurchaseResource, '/wallet/vouchers/purchase')

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
