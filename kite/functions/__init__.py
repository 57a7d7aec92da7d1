from kite.functions.additional import AdditionalFunctionRegistry, AdditionalLookupFunction, default_additional_functions
from kite.functions.base import Function, FunctionRegistry
from kite.functions.builtins import Base64, Jwt, Location, Now, RandomInteger, Timestamp, Uuid, Variable
from kite.functions.lookup import Lookup


def default_registry(additional_functions=None):
    """Build a new registry holding every built-in function."""
    return FunctionRegistry([
        Lookup(additional_functions),
        Location(),
        Variable(),
        Uuid(),
        Now(),
        Timestamp(),
        RandomInteger(),
        Base64(),
        Jwt(),
    ])


__all__ = [
    'AdditionalFunctionRegistry',
    'AdditionalLookupFunction',
    'Function',
    'FunctionRegistry',
    'default_additional_functions',
    'default_registry',
]
