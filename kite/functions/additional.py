"""Post-processors chained onto a lookup with ``:Suffix``.

``{{Lookup(order.reference:UpperCase)}}`` resolves ``order.reference`` then
hands the value to the first registered additional function whose ``match``
accepts ``UpperCase``.
"""
import base64
from urllib.parse import quote

from kite.exceptions import UnknownSubFunctionError


class AdditionalLookupFunction(object):
    name = None

    def match(self, suffix):
        return suffix.strip().lower() == self.name.lower()

    def apply(self, value, suffix):
        raise NotImplementedError


class UpperCase(AdditionalLookupFunction):
    name = 'UpperCase'

    def apply(self, value, suffix):
        return value.upper()


class LowerCase(AdditionalLookupFunction):
    name = 'LowerCase'

    def apply(self, value, suffix):
        return value.lower()


class UrlEncode(AdditionalLookupFunction):
    name = 'UrlEncode'

    def apply(self, value, suffix):
        return quote(value, safe='')


class Length(AdditionalLookupFunction):
    name = 'Length'

    def apply(self, value, suffix):
        return str(len(value))


class Trim(AdditionalLookupFunction):
    name = 'Trim'

    def apply(self, value, suffix):
        return value.strip()


class Base64(AdditionalLookupFunction):
    name = 'Base64'

    def apply(self, value, suffix):
        return base64.b64encode(value.encode('utf-8')).decode('ascii')


class AdditionalFunctionRegistry(object):
    """Ordered list of additional functions; the first match wins."""

    def __init__(self, functions=None):
        self._functions = list(functions or [])

    def __iter__(self):
        return iter(self._functions)

    def register(self, function):
        self._functions.append(function)
        return function

    def find(self, suffix):
        for function in self._functions:
            if function.match(suffix):
                return function
        raise UnknownSubFunctionError(suffix)

    def apply(self, value, suffix):
        return self.find(suffix).apply(value, suffix)


def default_additional_functions():
    return AdditionalFunctionRegistry([
        UpperCase(),
        LowerCase(),
        UrlEncode(),
        Length(),
        Trim(),
        Base64(),
    ])
