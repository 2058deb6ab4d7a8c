import uuid

from models import db, DatingProfile, Match, Swipe, User, Wallet


def create_profile(client, headers, **overrides):
    payload = {
        'display_name': 'Thandi',
        'age': '21',
        'bio': 'Second year CS',
        'interests': 'Hiking, Coding , ,Jazz',
        'looking_for': 'friendship',
    }
    payload.update(overrides)
    return client.post('/dating/profile', json=payload, headers=headers)


class TestAuth:
    def test_health_is_public(self, client):
        resp = client.get('/health')
        assert resp.status_code == 200
        assert resp.get_json() == {'status': 'ok'}

    def test_missing_token(self, client):
        resp = client.get('/dating/feed')
        assert resp.status_code == 401
        assert resp.get_json()['success'] is False

    def test_wrong_secret(self, client, auth_headers):
        resp = client.get('/dating/feed', headers=auth_headers('u1', secret='not-the-real-secret-but-long-enough-anyway'))
        assert resp.status_code == 401
        assert resp.get_json()['error']['message'] == 'Invalid token'

    def test_expired_token(self, client, auth_headers):
        resp = client.get('/dating/feed', headers=auth_headers('u1', expires_in=-3600))
        assert resp.status_code == 401
        assert resp.get_json()['error']['message'] == 'Token expired'


class TestCurrentUser:
    def test_first_call_creates_user_and_wallet(self, client, auth_headers):
        resp = client.get('/users/me', headers=auth_headers('new-user'))

        assert resp.status_code == 200
        data = resp.get_json()['data']
        assert data['id'] == 'new-user'
        assert data['full_name'] == 'Student new-user'
        assert db.session.get(User, 'new-user') is not None
        assert Wallet.query.filter_by(user_id='new-user').one().balance_cents == 0

    def test_second_call_reuses_user(self, client, auth_headers):
        client.get('/users/me', headers=auth_headers('u1'))
        client.get('/users/me', headers=auth_headers('u1'))

        assert User.query.count() == 1
        assert Wallet.query.count() == 1

    def test_patch_updates_fields(self, client, auth_headers):
        resp = client.patch(
            '/users/me',
            json={'institution_name': ' UCT ', 'course_program': 'BSc'},
            headers=auth_headers('u1')
        )

        assert resp.status_code == 200
        assert resp.get_json()['data']['institution_name'] == 'UCT'


class TestDatingProfile:
    def test_create_profile(self, client, auth_headers):
        resp = create_profile(client, auth_headers('u1'))

        assert resp.status_code == 201
        data = resp.get_json()['data']
        assert data['age'] == 21
        assert data['interests'] == ['Hiking', 'Coding', 'Jazz']

    def test_missing_fields_write_nothing(self, client, auth_headers):
        resp = create_profile(client, auth_headers('u1'), display_name='  ')

        assert resp.status_code == 400
        assert DatingProfile.query.count() == 0

    def test_underage_rejected(self, client, auth_headers):
        resp = create_profile(client, auth_headers('u1'), age=17)
        assert resp.status_code == 400

    def test_second_profile_conflicts(self, client, auth_headers):
        headers = auth_headers('u1')
        create_profile(client, headers)

        resp = create_profile(client, headers)

        assert resp.status_code == 409

    def test_get_without_profile(self, client, auth_headers):
        resp = client.get('/dating/profile', headers=auth_headers('u1'))

        assert resp.status_code == 404
        assert resp.get_json()['error']['details'] == {'requires_profile': True}

    def test_patch_profile(self, client, auth_headers):
        headers = auth_headers('u1')
        create_profile(client, headers)

        resp = client.patch('/dating/profile', json={'bio': 'Now in honours'}, headers=headers)

        assert resp.status_code == 200
        assert resp.get_json()['data']['bio'] == 'Now in honours'
        assert resp.get_json()['data']['display_name'] == 'Thandi'


class TestSwipeFlow:
    def test_like_then_reciprocal_like_matches_once(self, client, auth_headers, make_student):
        make_student('u1', display_name='Thandi')
        make_student('u2', display_name='Sipho')

        first = client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': True},
                            headers=auth_headers('u1'))
        assert first.status_code == 201
        assert first.get_json()['data']['is_match'] is False
        assert first.get_json()['message'] == 'Like sent!'
        assert Swipe.query.filter_by(swiper_id='u1').count() == 1
        assert Match.query.count() == 0

        second = client.post('/dating/swipes', json={'swiped_id': 'u1', 'is_like': True},
                             headers=auth_headers('u2'))
        body = second.get_json()
        assert body['data']['is_match'] is True
        assert body['message'] == "It's a Match! You and Thandi matched!"
        assert Match.query.filter_by(user1_id='u1', user2_id='u2').count() == 1

    def test_repeat_swipe_conflicts(self, client, auth_headers, make_student):
        make_student('u1')
        make_student('u2')
        headers = auth_headers('u1')
        client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': False}, headers=headers)

        resp = client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': True}, headers=headers)

        assert resp.status_code == 409
        assert Swipe.query.count() == 1

    def test_is_like_must_be_boolean(self, client, auth_headers, make_student):
        make_student('u1')
        make_student('u2')

        resp = client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': 'yes'},
                           headers=auth_headers('u1'))

        assert resp.status_code == 400

    def test_self_swipe(self, client, auth_headers, make_student):
        make_student('u1')

        resp = client.post('/dating/swipes', json={'swiped_id': 'u1', 'is_like': True},
                           headers=auth_headers('u1'))

        assert resp.status_code == 400

    def test_feed_hides_swiped_profiles(self, client, auth_headers, make_student):
        for user_id in ('u1', 'u2', 'u3'):
            make_student(user_id)
        headers = auth_headers('u1')
        client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': False}, headers=headers)

        resp = client.get('/dating/feed', headers=headers)

        profiles = resp.get_json()['data']['profiles']
        assert [p['user_id'] for p in profiles] == ['u3']

    def test_feed_without_profile(self, client, auth_headers):
        resp = client.get('/dating/feed', headers=auth_headers('u1'))

        assert resp.status_code == 404
        assert resp.get_json()['error']['details']['requires_profile'] is True


class TestMatchesApi:
    def test_list_and_detail(self, client, auth_headers, make_student):
        make_student('u1')
        make_student('u2', display_name='Sipho')
        client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': True}, headers=auth_headers('u1'))
        client.post('/dating/swipes', json={'swiped_id': 'u1', 'is_like': True}, headers=auth_headers('u2'))

        resp = client.get('/dating/matches', headers=auth_headers('u1'))
        matches = resp.get_json()['data']['matches']
        assert len(matches) == 1
        assert matches[0]['partner']['display_name'] == 'Sipho'

        match_id = matches[0]['match_id']
        detail = client.get(f'/dating/matches/{match_id}', headers=auth_headers('u2'))
        assert detail.status_code == 200
        assert detail.get_json()['data']['partner_id'] == 'u1'

    def test_detail_for_outsider(self, client, auth_headers, make_student):
        make_student('u1')
        make_student('u2')
        make_student('u3')
        client.post('/dating/swipes', json={'swiped_id': 'u2', 'is_like': True}, headers=auth_headers('u1'))
        client.post('/dating/swipes', json={'swiped_id': 'u1', 'is_like': True}, headers=auth_headers('u2'))
        match_id = Match.query.one().id

        resp = client.get(f'/dating/matches/{match_id}', headers=auth_headers('u3'))

        assert resp.status_code == 403

    def test_unknown_match(self, client, auth_headers):
        assert client.get(f'/dating/matches/{uuid.uuid4()}', headers=auth_headers('u1')).status_code == 404
        assert client.get('/dating/matches/not-a-uuid', headers=auth_headers('u1')).status_code == 404
