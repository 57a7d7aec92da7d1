"""Expansion of ``{{Function(arg, ...)}}`` expressions.

Arguments are expanded inside-out before the function they belong to is
called, and the text a function returns is spliced in as-is: it is never
scanned again for ``{{``. Scanning only moves forward, so expansion always
terminates.
"""
import logging

from kite.exceptions import FunctionError, KiteError, MalformedExpressionError, MissingCaptureError
from kite.functions import default_registry

logger = logging.getLogger(__name__)

OPEN = '{{'
CLOSE = '}}'
DEFAULT_MAX_DEPTH = 32


def find_closing(text, start):
    """Return the index of the ``}}`` closing the ``{{`` found at ``start``."""
    depth = 0
    i = start
    while i < len(text):
        if text.startswith(OPEN, i):
            depth += 1
            i += 2
        elif text.startswith(CLOSE, i):
            depth -= 1
            if depth == 0:
                return i
            i += 2
        else:
            i += 1
    raise MalformedExpressionError('Unclosed expression: %s' % text[start:])


def split_arguments(text):
    """Split an argument list at commas outside nested ``{{}}`` and ``()``."""
    if not text.strip():
        return []

    args = []
    braces = parens = 0
    current = 0
    i = 0
    while i < len(text):
        if text.startswith(OPEN, i):
            braces += 1
            i += 2
            continue
        if text.startswith(CLOSE, i) and braces:
            braces -= 1
            i += 2
            continue

        char = text[i]
        if braces == 0:
            if char == '(':
                parens += 1
            elif char == ')':
                parens -= 1
            elif char == ',' and parens == 0:
                args.append(text[current:i].strip())
                current = i + 1
        i += 1

    args.append(text[current:].strip())
    return args


def parse_call(body):
    """Split ``Name(arg, ...)`` into the name and its raw argument text.

    Returns ``(name, None)`` for a bare ``Name``.
    """
    if not body.strip():
        raise MalformedExpressionError('Empty expression')

    open_paren = body.find('(')
    if open_paren == -1:
        if ')' in body:
            raise MalformedExpressionError('Unbalanced parenthesis in %s' % body)
        return body.strip(), None

    name = body[:open_paren].strip()
    if not name:
        raise MalformedExpressionError('Missing function name in %s' % body)

    depth = 0
    braces = 0
    i = open_paren
    while i < len(body):
        if body.startswith(OPEN, i):
            braces += 1
            i += 2
            continue
        if body.startswith(CLOSE, i) and braces:
            braces -= 1
            i += 2
            continue

        if braces == 0:
            if body[i] == '(':
                depth += 1
            elif body[i] == ')':
                depth -= 1
                if depth == 0:
                    if body[i + 1:].strip():
                        raise MalformedExpressionError('Unexpected text after %s: %s' % (name, body))
                    return name, body[open_paren + 1:i]
        i += 1

    raise MalformedExpressionError('Unbalanced parenthesis in %s' % body)


class ContextProcessor(object):
    def __init__(self, context, functions=None, max_depth=DEFAULT_MAX_DEPTH):
        self.context = context
        self.functions = functions if functions is not None else default_registry()
        self.max_depth = max_depth

    def expand(self, text):
        return self._expand(text, 0)

    def expand_value(self, value):
        """Expand every string found in a decoded JSON value."""
        if isinstance(value, str):
            return self.expand(value)
        if isinstance(value, dict):
            return dict((k, self.expand_value(v)) for k, v in value.items())
        if isinstance(value, list):
            return [self.expand_value(v) for v in value]
        return value

    def _expand(self, text, depth):
        if depth > self.max_depth:
            raise MalformedExpressionError(
                'Expression nested deeper than %d levels' % self.max_depth)

        out = []
        position = 0
        while True:
            start = text.find(OPEN, position)
            if start == -1:
                out.append(text[position:])
                return ''.join(out)

            end = find_closing(text, start)
            out.append(text[position:start])
            out.append(self._evaluate(text[start:end + 2], depth))
            position = end + 2

    def _evaluate(self, expression, depth):
        name = expression[2:-2].strip()
        try:
            name, raw_args = parse_call(expression[2:-2])
            if raw_args is None:
                result = self._resolve_reference(name)
            else:
                args = [self._expand(arg, depth + 1) for arg in split_arguments(raw_args)]
                result = self.functions.get(name)(args, self.context)
        except KiteError as e:
            raise e.with_expression(expression)
        except Exception as e:
            raise FunctionError('%s failed: %s' % (name, e), expression) from e

        logger.debug('expanded %s to %r', expression, result)
        return result

    def _resolve_reference(self, name):
        value = self.context.get_variable(name)
        if value is None:
            value = self.context.get_body(name)
        if value is None:
            raise MissingCaptureError(
                'No variable or payload found for %s' % name, name)
        return value
