import os, sys, pytest
# Ensure project root is on path so 'flask_asyncapi' and 'examples' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from examples.chat_app import create_app


@pytest.fixture(scope='session')
def app_instance():
    app = create_app({'TESTING': True})
    yield app


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()
