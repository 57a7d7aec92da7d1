import logging

from kite import jsonpath
from kite.exceptions import MissingCaptureError
from kite.functions.additional import default_additional_functions
from kite.functions.base import Function

logger = logging.getLogger(__name__)


def split_suffix(expression):
    """Split ``target:Suffix`` at the first colon.

    Returns ``(target, suffix)``; ``suffix`` is None when there is no colon
    or when either side of it is empty.
    """
    target, sep, suffix = expression.partition(':')
    if sep and target and suffix:
        return target, suffix
    return expression, None


def get_field_value(context, target):
    object_name = target.split('.', 1)[0]
    body = context.get_body(object_name)
    if body is None:
        raise MissingCaptureError(
            'No payload found for %s. Are you sure any request named %s was performed?'
            % (object_name, object_name), object_name)

    if '.' not in target:
        return body

    path = target[len(object_name) + 1:]
    return jsonpath.read(body, path, object_name)


class Lookup(Function):
    """``{{Lookup(name[.jsonpath][:SubFunction])}}``"""
    name = 'Lookup'
    min_args = 1
    max_args = 1

    def __init__(self, additional_functions=None):
        if additional_functions is None:
            additional_functions = default_additional_functions()
        self.additional_functions = additional_functions

    def apply(self, args, context):
        target, suffix = split_suffix(args[0])
        value = get_field_value(context, target)
        if suffix is None:
            return value

        logger.debug('applying %s to lookup of %s', suffix, target)
        return self.additional_functions.apply(value, suffix)
