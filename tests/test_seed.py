from models import DatingProfile, User, Wallet
from seed_students import SEED_STUDENTS, seed_database
from utils.swiping import get_profile_feed


def test_seeds_students_with_wallets_and_profiles(app):
    result = seed_database()

    assert result == {'created': len(SEED_STUDENTS), 'skipped': 0, 'errors': 0}
    assert User.query.count() == len(SEED_STUDENTS)
    assert DatingProfile.query.count() == len(SEED_STUDENTS)
    assert Wallet.query.filter_by(user_id='seed_student_002').one().balance_cents == 125050


def test_is_idempotent(app):
    seed_database()

    result = seed_database()

    assert result == {'created': 0, 'skipped': len(SEED_STUDENTS), 'errors': 0}
    assert User.query.count() == len(SEED_STUDENTS)


def test_seeded_students_fill_the_feed(app):
    seed_database()

    feed = get_profile_feed('seed_student_001')

    assert len(feed) == len(SEED_STUDENTS) - 1
    assert 'seed_student_001' not in {card['user_id'] for card in feed}
