"""Read single values out of captured JSON payloads.

Thin adapter over the extended ``jsonpath-ng`` parser, so filters such as
``items[?(@.id == 'b')].name`` work. Paths may be written with or without the
leading ``$``: ``items[0].id`` and ``$.items[0].id`` are the same path.
"""
import json

from jsonpath_ng.ext import parse as parse_path
from jsonpath_ng.exceptions import JsonPathLexerError, JsonPathParserError

from kite.exceptions import FieldMissingError, InvalidPathError, PathNotFoundError

_NOT_JSON = object()


def _compile(path, object_name):
    if path.startswith('$'):
        expression = path
    elif path.startswith('['):
        expression = '$' + path
    else:
        expression = '$.' + path
    try:
        return parse_path(expression)
    except (JsonPathLexerError, JsonPathParserError) as e:
        raise InvalidPathError(
            'Cannot apply [Lookup]: invalid path <%s>, on object named <%s>' % (path, object_name),
            path=path, object_name=object_name) from e


def _load(body):
    try:
        return json.loads(body)
    except ValueError:
        return _NOT_JSON


def to_string(value):
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, separators=(',', ':'))


def read_value(body, path, object_name=None):
    """Return the raw (decoded) value found at ``path`` in ``body``."""
    document = _load(body)
    if not isinstance(document, (dict, list)):
        raise InvalidPathError(
            'Cannot apply [Lookup]: path <%s> cannot be read on object named <%s>, '
            'its payload is not a JSON object or array' % (path, object_name),
            path=path, object_name=object_name)

    matches = _compile(path, object_name).find(document)
    if not matches:
        raise PathNotFoundError(
            'Lookup : path not found [%s] for object %s' % (path, object_name),
            path=path, object_name=object_name)

    if len(matches) == 1:
        value = matches[0].value
    else:
        value = [match.value for match in matches]

    if value is None:
        raise FieldMissingError(
            'Lookup : Could not get field [%s] for object %s' % (path, object_name),
            path=path, object_name=object_name)
    return value


def read(body, path, object_name=None):
    return to_string(read_value(body, path, object_name))
