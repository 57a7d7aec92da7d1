import re
from collections.abc import MutableMapping, MutableSequence

from kite.exceptions import CheckError

DEFAULT_STATUS = {
    'POST': 201,
    'PUT': 204,
    'DELETE': 204,
    'GET': 200,
    'PATCH': 200,
}


class Comparison(object):
    def __init__(self, obj, **kwargs):
        self._value = obj.get('value')

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return '<%s %r>' % (self.name, self._value)


class Equality(Comparison):
    name = 'equal'

    def __eq__(self, other):
        return self._value == other


class String(Comparison):
    name = 'string'

    def __eq__(self, other):
        return isinstance(other, str)


class Regex(Comparison):
    name = 'regex'

    def __eq__(self, other):
        return isinstance(other, str) and bool(re.search(self._value, other))


class Uuid(Comparison):
    name = 'uuid'
    _re = re.compile(r'^[a-f0-9]{8}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{4}-?[a-f0-9]{12}$', re.I)

    def __eq__(self, other):
        return isinstance(other, str) and bool(self._re.match(other))


class ISO8601DateTime(Comparison):
    name = 'iso-8601'
    _re = re.compile(
        r'(?P<year>\d{4})-(?P<month>\d{1,2})-(?P<day>\d{1,2})'
        r'[T ](?P<hour>\d{1,2}):(?P<minute>\d{1,2})'
        r'(?::(?P<second>\d{1,2})(?:\.(?P<microsecond>\d{1,6})\d{0,6})?)?'
        r'(?P<tzinfo>Z|[+-]\d{2}:?\d{2})?$'
    )

    def __eq__(self, other):
        return isinstance(other, str) and bool(self._re.match(other))


class Template(Comparison):
    """Compares against a value computed from earlier captures."""
    name = 'template'

    def __init__(self, obj, processor=None, **kwargs):
        super(Template, self).__init__(obj, **kwargs)
        if processor is None:
            raise ValueError('processor required')
        self.processor = processor

    def __eq__(self, other):
        value = self.processor.expand(self._value)
        if isinstance(other, str):
            return value == other
        return value == self.processor.context.codec.format(other)


COMPARISONS = dict((c.name, c) for c in [Equality, String, Regex, Uuid, ISO8601DateTime, Template])


def get_comparison(value, processor):
    type_field = '_t'
    if isinstance(value, MutableMapping) and type_field in value:
        _type = value[type_field]
        if _type not in COMPARISONS:
            raise ValueError('Unknown comparison type: %s' % _type)
        return COMPARISONS[_type](value, processor=processor)

    if isinstance(value, str):
        return processor.expand(value)
    return value


def compare(expected, actual, processor):
    """Yield the differences between an expected and an actual JSON value.

    Each difference is a dict with ``path`` (list of keys and indexes) and a
    ``status`` of ``unequal``, ``missing`` or ``extra``.
    """
    def compare_values(path, value, other):
        value = get_comparison(value, processor)

        if isinstance(value, MutableMapping) and isinstance(other, MutableMapping):
            yield from compare_dicts(path, value, other)
        elif isinstance(value, MutableSequence) and isinstance(other, MutableSequence):
            yield from compare_lists(path, value, other)
        elif value != other:
            yield {'path': path, 'status': 'unequal', 'expected': value, 'actual': other}

    def compare_dicts(path, value, other):
        for key in value:
            inner_path = path + [key]
            if key not in other:
                yield {'path': inner_path, 'status': 'missing', 'expected': value[key]}
                continue
            yield from compare_values(inner_path, value[key], other[key])

        for key in other:
            if key not in value:
                yield {'path': path + [key], 'status': 'extra', 'actual': other[key]}

    def compare_lists(path, value_list, other_list):
        for n, (value, other) in enumerate(zip(value_list, other_list)):
            yield from compare_values(path + [n], value, other)

        value_len = len(value_list)
        other_len = len(other_list)
        if value_len < other_len:
            for n, other in enumerate(other_list[value_len:], start=value_len):
                yield {'path': path + [n], 'status': 'extra', 'actual': other}
        elif value_len > other_len:
            for n, value in enumerate(value_list[other_len:], start=other_len):
                yield {'path': path + [n], 'status': 'missing', 'expected': value}

    return list(compare_values([], expected, actual))


def expected_status(command):
    if command.expected_status is not None:
        return command.expected_status
    return DEFAULT_STATUS.get(command.method, 200)


def check_status(command, response):
    expected = expected_status(command)
    if response.status_code != expected:
        raise CheckError(
            'Command %s: expected status %d, got %d' % (command.name, expected, response.status_code),
            command_name=command.name)


def check_body(command, body, processor):
    """Extra fields in the response are allowed, everything expected must match."""
    if command.expected_body is None:
        return

    diffs = [d for d in compare(command.expected_body, body, processor) if d['status'] != 'extra']
    if diffs:
        lines = ['Command %s: response body does not match' % command.name]
        for diff in diffs:
            lines.append('  %s %s' % ('.'.join(str(p) for p in diff['path']) or '<root>', diff['status']))
        raise CheckError('\n'.join(lines), command_name=command.name, diffs=diffs)
