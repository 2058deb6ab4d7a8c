import uuid


def create_goal(client, headers, **overrides):
    payload = {'name': 'New Laptop', 'target_amount': '8000', 'icon': 'laptop'}
    payload.update(overrides)
    return client.post('/savings/goals', json=payload, headers=headers)


class TestSavingsApi:
    def test_wallet_created_on_first_visit(self, client, auth_headers):
        resp = client.get('/savings/wallet', headers=auth_headers('u1'))

        assert resp.status_code == 200
        assert resp.get_json()['data'] == {'balance_cents': 0, 'balance': '0.00', 'currency': 'ZAR'}

    def test_create_and_list_goals(self, client, auth_headers):
        headers = auth_headers('u1')

        created = create_goal(client, headers)
        assert created.status_code == 201
        assert created.get_json()['data']['target_amount'] == '8000.00'

        listed = client.get('/savings/goals', headers=headers).get_json()['data']
        assert listed['total'] == 1
        assert listed['goals'][0]['name'] == 'New Laptop'

    def test_create_goal_validation(self, client, auth_headers):
        resp = create_goal(client, auth_headers('u1'), name='')

        assert resp.status_code == 400
        assert resp.get_json()['error']['message'] == 'Please fill in all fields'

    def test_target_too_large_for_storage(self, client, auth_headers):
        headers = auth_headers('u1')

        resp = create_goal(client, headers, target_amount='1e20')

        assert resp.status_code == 400
        assert client.get('/savings/goals', headers=headers).get_json()['data']['total'] == 0

    def test_deposit(self, client, auth_headers, make_student):
        make_student('u1', balance_cents=50000, dating=False)
        headers = auth_headers('u1')
        goal_id = create_goal(client, headers).get_json()['data']['id']

        resp = client.post(f'/savings/goals/{goal_id}/deposit', json={'amount': '200'}, headers=headers)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body['message'] == 'R200.00 added to New Laptop'
        assert body['data']['wallet']['balance'] == '300.00'
        assert body['data']['goal']['current_amount'] == '200.00'
        assert body['data']['transaction']['amount'] == '-200.00'

        ledger = client.get('/transactions', headers=headers).get_json()
        assert ledger['pagination']['total'] == 1
        assert ledger['data'][0]['type'] == 'Savings'

    def test_deposit_insufficient_funds(self, client, auth_headers, make_student):
        make_student('u1', balance_cents=1000, dating=False)
        headers = auth_headers('u1')
        goal_id = create_goal(client, headers).get_json()['data']['id']

        resp = client.post(f'/savings/goals/{goal_id}/deposit', json={'amount': 20}, headers=headers)

        assert resp.status_code == 400
        assert client.get('/savings/wallet', headers=headers).get_json()['data']['balance_cents'] == 1000

    def test_deposit_unknown_goal(self, client, auth_headers, make_student):
        make_student('u1', balance_cents=1000, dating=False)
        headers = auth_headers('u1')

        missing = client.post(f'/savings/goals/{uuid.uuid4()}/deposit', json={'amount': 1}, headers=headers)
        garbled = client.post('/savings/goals/nope/deposit', json={'amount': 1}, headers=headers)

        assert missing.status_code == 404
        assert garbled.status_code == 404

    def test_transactions_rejects_bad_paging(self, client, auth_headers):
        resp = client.get('/transactions?page=0', headers=auth_headers('u1'))
        assert resp.status_code == 400
