import base64
import json
import random
import time
import uuid
from datetime import datetime, timezone

from kite.exceptions import MalformedExpressionError, MissingCaptureError
from kite.functions.base import Function

JWT_HEADER = {'typ': 'JWT', 'alg': 'HS256'}


def _b64(text):
    return base64.b64encode(text.encode('utf-8')).decode('ascii')


class Location(Function):
    name = 'Location'
    min_args = 1
    max_args = 1

    def apply(self, args, context):
        location = context.get_location(args[0])
        if location is None:
            raise MissingCaptureError(
                'No location found for %s. Did request %s return a Location header?'
                % (args[0], args[0]), args[0])
        return location


class Variable(Function):
    name = 'Variable'
    min_args = 1
    max_args = 1

    def apply(self, args, context):
        value = context.get_variable(args[0])
        if value is None:
            raise MissingCaptureError('No variable named %s was declared' % args[0], args[0])
        return value


class Uuid(Function):
    name = 'Uuid'
    max_args = 0

    def apply(self, args, context):
        return str(uuid.uuid4())


class Now(Function):
    """Current UTC time, ISO-8601 unless a strftime format is given."""
    name = 'Now'
    max_args = 1

    def apply(self, args, context):
        now = datetime.now(timezone.utc)
        if args and args[0]:
            return now.strftime(args[0])
        return now.isoformat()


class Timestamp(Function):
    name = 'Timestamp'
    max_args = 0

    def apply(self, args, context):
        return str(int(time.time() * 1000))


class RandomInteger(Function):
    name = 'RandomInteger'
    max_args = 2

    def apply(self, args, context):
        try:
            bounds = [int(arg) for arg in args]
        except ValueError:
            raise MalformedExpressionError(
                'RandomInteger bounds must be integers, got %s' % ', '.join(args)) from None

        if not bounds:
            low, high = 0, 2 ** 31 - 1
        elif len(bounds) == 1:
            low, high = 0, bounds[0]
        else:
            low, high = bounds
        if low > high:
            raise MalformedExpressionError('RandomInteger: %d is greater than %d' % (low, high))
        return str(random.randint(low, high))


class Base64(Function):
    name = 'Base64'
    min_args = 1
    max_args = 1

    def apply(self, args, context):
        return _b64(args[0])


class Jwt(Function):
    """Unsigned token carrying the given JSON payload, for stubbed auth."""
    name = 'Jwt'
    min_args = 1
    max_args = 1

    def apply(self, args, context):
        try:
            payload = json.loads(args[0])
        except ValueError:
            raise MalformedExpressionError('Jwt payload is not valid JSON: %s' % args[0]) from None

        header = json.dumps(JWT_HEADER, separators=(',', ':'))
        claims = json.dumps(payload, separators=(',', ':'))
        return '%s.%s' % (_b64(header), _b64(claims))
