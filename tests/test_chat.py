from codeassist.services.model_gateway import FAILURE_REPLY, MESSAGE_TRUNCATION_NOTICE


def test_first_message_creates_session_and_stores_both_turns(client, upstream):
    response = client.post('/api/chat', json={'message': 'fix this loop', 'sessionId': 'abc'})
    assert response.status_code == 200
    assert response.json() == {'response': 'Here is the fixed loop.', 'sessionId': 'abc'}

    sessions = client.get('/api/sessions').json()['sessions']
    assert [(item['id'], item['title']) for item in sessions] == [('abc', 'fix this loop')]

    messages = client.get('/api/chat/abc').json()['messages']
    assert [(item['role'], item['content']) for item in messages] == [
        ('user', 'fix this loop'),
        ('assistant', 'Here is the fixed loop.'),
    ]
    assert messages[0]['sessionId'] == 'abc'
    assert messages[0]['id'] < messages[1]['id']


def test_long_first_message_gets_ellipsized_title(client):
    message = 'Why does my recursive function overflow the stack?'
    client.post('/api/chat', json={'message': message, 'sessionId': 's-long'})
    session = client.get('/api/sessions').json()['sessions'][0]
    assert session['title'] == message[:30] + '...'


def test_existing_session_keeps_title_and_moves_to_front(client):
    client.post('/api/chat', json={'message': 'first', 'sessionId': 'one'})
    client.post('/api/chat', json={'message': 'second', 'sessionId': 'two'})
    client.post('/api/chat', json={'message': 'follow up', 'sessionId': 'one'})
    sessions = client.get('/api/sessions').json()['sessions']
    assert [item['id'] for item in sessions] == ['one', 'two']
    assert sessions[0]['title'] == 'first'


def test_missing_session_id_gets_generated(client):
    response = client.post('/api/chat', json={'message': 'hi'})
    assert response.status_code == 200
    session_id = response.json()['sessionId']
    assert session_id
    assert len(client.get(f'/api/chat/{session_id}').json()['messages']) == 2


def test_upstream_failure_is_returned_as_flagged_reply(client, upstream):
    upstream.error = RuntimeError('upstream down')
    response = client.post('/api/chat', json={'message': 'hello', 'sessionId': 'err'})
    assert response.status_code == 200
    assert response.json() == {'response': FAILURE_REPLY, 'sessionId': 'err', 'error': True}
    messages = client.get('/api/chat/err').json()['messages']
    assert messages[-1] == {**messages[-1], 'role': 'assistant', 'content': FAILURE_REPLY}


def test_oversized_message_is_accepted_and_truncated_upstream(client, upstream):
    message = 'a' * 30001
    response = client.post('/api/chat', json={'message': message, 'sessionId': 'big'})
    assert response.status_code == 200
    assert 'error' not in response.json()
    assert upstream.prompts[-1] == 'a' * 30000 + MESSAGE_TRUNCATION_NOTICE
    stored = client.get('/api/chat/big').json()['messages'][0]['content']
    assert stored == message


def test_chat_settings_are_forwarded_to_gateway(client, context, upstream):
    payload = {
        'message': 'hi',
        'sessionId': 'cfg',
        'settings': {'temperature': 0.5, 'maxLength': 1024, 'darkMode': True},
    }
    assert client.post('/api/chat', json=payload).status_code == 200
    assert context.gateway.settings.temperature == 0.5
    assert context.gateway.settings.max_output_tokens == 1024
    assert upstream.model_settings[-1]['max_tokens'] == 1024


def test_invalid_chat_payload_is_rejected_without_side_effects(client, upstream):
    bad_payloads = [
        {},
        {'sessionId': 'x'},
        {'message': 123, 'sessionId': 'x'},
        {'message': 'hi', 'sessionId': 'x', 'settings': {'temperature': 2, 'maxLength': 10}},
        {'message': 'hi', 'sessionId': 'x', 'settings': {'temperature': 0.5, 'maxLength': 0}},
    ]
    for payload in bad_payloads:
        response = client.post('/api/chat', json=payload)
        assert response.status_code == 400
        assert response.json()['error'].startswith('Invalid request data')
    assert client.get('/api/sessions').json()['sessions'] == []
    assert upstream.prompts == []


def test_history_of_unknown_session_is_empty(client):
    response = client.get('/api/chat/nope')
    assert response.status_code == 200
    assert response.json() == {'messages': []}


def test_clear_history_keeps_session(client):
    client.post('/api/chat', json={'message': 'hello', 'sessionId': 'keep'})
    response = client.delete('/api/chat/keep')
    assert response.status_code == 200
    assert response.json() == {'success': True}
    assert client.get('/api/chat/keep').json()['messages'] == []
    assert [item['id'] for item in client.get('/api/sessions').json()['sessions']] == ['keep']


def test_settings_endpoint_updates_gateway(client, context):
    response = client.post('/api/settings', json={'temperature': 0.7, 'maxLength': 2048})
    assert response.status_code == 200
    assert response.json() == {'success': True, 'settings': {'temperature': 0.7, 'maxLength': 2048}}
    assert context.gateway.settings.temperature == 0.7
    assert context.gateway.settings.max_output_tokens == 2048


def test_settings_endpoint_validates(client, context):
    response = client.post('/api/settings', json={'temperature': -1, 'maxLength': 2048})
    assert response.status_code == 400
    assert 'error' in response.json()
    assert context.gateway.settings.temperature == 0.2


def test_upload_probe(client):
    response = client.post('/api/upload/process')
    assert response.status_code == 200
    assert response.json()['success'] is True


def test_health(client):
    assert client.get('/api/health').json() == {'status': 'ok'}


def test_settings_endpoint_rejects_string_numbers(client, context):
    for payload in (
        {'temperature': '0.9', 'maxLength': 77},
        {'temperature': 0.9, 'maxLength': '77'},
        {'temperature': True, 'maxLength': 77},
    ):
        response = client.post('/api/settings', json=payload)
        assert response.status_code == 400
        assert response.json()['error'].startswith('Invalid request data')
    assert context.gateway.settings.temperature == 0.2
    assert context.gateway.settings.max_output_tokens == 8192


def test_chat_rejects_string_typed_settings(client, context, upstream):
    response = client.post(
        '/api/chat',
        json={'message': 'hi', 'sessionId': 'x', 'settings': {'temperature': '0.5', 'maxLength': '100'}},
    )
    assert response.status_code == 400
    assert context.gateway.settings.temperature == 0.2
    assert client.get('/api/sessions').json()['sessions'] == []
    assert upstream.prompts == []


def test_empty_session_id_is_treated_as_missing(client):
    response = client.post('/api/chat', json={'message': 'hi', 'sessionId': ''})
    assert response.status_code == 200
    session_id = response.json()['sessionId']
    assert session_id
    assert len(client.get(f'/api/chat/{session_id}').json()['messages']) == 2
