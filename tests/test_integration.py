import pytest
from flask import Flask
from pydantic import BaseModel

from examples.unified_api import create_app
from flask_asyncapi import (
    AsyncAPI,
    ChannelConfig,
    MessageConfig,
    UnifiedAPI,
    build_openapi_spec,
    create_unified_info,
    create_unified_servers,
    merge_api_docs,
)


class Ping(BaseModel):
    seq: int


def _noop(ws, message, context):
    pass


def _ping_channel(path='/ws/ping'):
    return ChannelConfig(path=path, send=MessageConfig(payload=Ping))


@pytest.fixture()
def unified_client():
    return create_app({'TESTING': True}).test_client()


def test_unified_example_serves_both_documents(unified_client):
    openapi = unified_client.get('/api/openapi.json').get_json()
    asyncapi = unified_client.get('/api/asyncapi.json').get_json()
    assert openapi['openapi'] == '3.0.3'
    assert '/api/users' in openapi['paths']
    assert not any(p.startswith('/ws') for p in openapi['paths'])
    assert asyncapi['info']['title'] == 'Real-time Communication API'
    assert set(asyncapi['channels']) == {'chatRoom', 'notifications', 'dataStream'}
    assert asyncapi['servers']['production']['protocol'] == 'wss'


def test_unified_example_channel_routes(unified_client):
    assert unified_client.get('/ws/rooms/lobby').status_code == 400
    assert unified_client.get('/ws/stream/cpu', headers={'Upgrade': 'websocket'}).status_code == 426
    assert unified_client.get('/api/users').get_json()['users'][0]['username'] == 'alice'


def test_unified_example_discriminated_event(unified_client):
    doc = unified_client.get('/api/asyncapi.json').get_json()
    message = doc['components']['messages']['chatRoom_receive_message']
    key = message['payload']['$ref'].rsplit('/', 1)[-1]
    event = doc['components']['schemas'][key]['properties']['event']
    assert [v['properties']['type']['enum'] for v in event['oneOf']] == [['message'], ['user_joined'], ['user_left']]


def test_merge_binds_unbound_asyncapi():
    app = Flask(__name__)
    api = AsyncAPI()
    api.channel('ping', _ping_channel(), _noop)
    merged = merge_api_docs(app, api)
    assert api.app is app
    assert merged.registry is api.registry
    assert app.test_client().get('/ws/ping').status_code == 400


def test_merge_with_asyncapi_bound_elsewhere():
    ws_app, rest_app = Flask('ws'), Flask('rest')
    api = AsyncAPI(ws_app)
    api.channel('ping', _ping_channel(), _noop)
    merged = merge_api_docs(rest_app, api)
    assert api.app is ws_app
    merged.channel('pong', _ping_channel('/ws/pong'), _noop)
    assert rest_app.test_client().get('/ws/ping').status_code == 400
    assert rest_app.test_client().get('/ws/pong').status_code == 400
    assert ws_app.test_client().get('/ws/pong').status_code == 400
    assert list(merged.get_asyncapi_document(info={'title': 'T', 'version': '1'})['channels']) == ['ping', 'pong']


def test_merge_uses_custom_openapi_builder():
    app = Flask(__name__)
    custom = {'openapi': '3.0.3', 'info': {'title': 'Custom', 'version': '1'}, 'paths': {}}
    merged = merge_api_docs(app, AsyncAPI(), openapi_builder=lambda: custom)
    merged.openapi_doc('/openapi.json')
    assert app.test_client().get('/openapi.json').get_json() == custom


def test_merged_openapi_defaults_to_route_table():
    app = Flask(__name__)

    @app.get('/status')
    def status():
        """Service status"""
        return {}

    merged = merge_api_docs(app, AsyncAPI())
    merged.openapi_doc('/openapi.json')
    doc = merged.get_openapi_document()
    assert list(doc['paths']) == ['/status']
    assert doc == build_openapi_spec(app)


def test_unified_api_extension():
    app = Flask(__name__)

    @app.get('/ping')
    def ping():
        """Ping"""
        return 'pong'

    info = create_unified_info('Unified', '3.1.0', description='Both sides')
    servers = create_unified_servers(http={'url': 'http://localhost:5000'}, ws={'host': 'localhost:5000'})
    api = UnifiedAPI(
        app,
        openapi={'info': info['openapi'], 'servers': servers['openapi']},
        asyncapi={'info': info['asyncapi'], 'servers': servers['asyncapi']},
    )
    api.channel('ping', _ping_channel(), _noop)
    api.docs('/openapi.json', '/asyncapi.json')
    client = app.test_client()

    openapi = client.get('/openapi.json').get_json()
    assert list(openapi['paths']) == ['/ping']
    assert openapi['info']['title'] == 'Unified'
    assert openapi['servers'] == [{'url': 'http://localhost:5000', 'description': 'HTTP server'}]

    asyncapi = client.get('/asyncapi.json').get_json()
    assert asyncapi['info'] == {'title': 'Unified', 'version': '3.1.0', 'description': 'Both sides'}
    assert asyncapi['servers']['default'] == {
        'host': 'localhost:5000', 'protocol': 'ws', 'description': 'WebSocket server'}
    assert api.get_asyncapi_document()['channels']['ping']['address'] == '/ws/ping'


def test_create_unified_info_drops_missing_fields():
    info = create_unified_info('API', '1.0.0', contact={'name': 'Team'})
    assert info['openapi'] == {'title': 'API', 'version': '1.0.0', 'contact': {'name': 'Team'}}
    assert info['asyncapi'] == info['openapi']
    assert info['asyncapi'] is not info['openapi']


def test_create_unified_servers():
    assert create_unified_servers() == {'openapi': {}, 'asyncapi': {}}
    servers = create_unified_servers(ws={'host': 'api.example.com', 'protocol': 'wss', 'description': 'Prod'})
    assert servers['asyncapi']['default'] == {'host': 'api.example.com', 'protocol': 'wss', 'description': 'Prod'}
    assert servers['openapi'] == {}
