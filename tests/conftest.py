import json

import pytest

from kite.context import KiteContext
from kite.processor import ContextProcessor


@pytest.fixture
def context():
    return KiteContext()


@pytest.fixture
def processor(context):
    return ContextProcessor(context)


@pytest.fixture
def write_scenario(tmp_path):
    def write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data))
        return str(path)
    return write
