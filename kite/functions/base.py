from kite.exceptions import MalformedExpressionError, UnknownFunctionError


class Function(object):
    """A template function callable as ``{{Name(arg, ...)}}``.

    Subclasses set ``name`` and implement ``apply``. Arguments arrive already
    expanded. Functions must not modify the context they are given.
    """
    name = None
    min_args = 0
    max_args = None

    def __call__(self, args, context):
        self.check_arity(args)
        return self.apply(args, context)

    def check_arity(self, args):
        count = len(args)
        if count < self.min_args or (self.max_args is not None and count > self.max_args):
            if self.min_args == self.max_args:
                expected = str(self.min_args)
            elif self.max_args is None:
                expected = 'at least %d' % self.min_args
            else:
                expected = '%d to %d' % (self.min_args, self.max_args)
            raise MalformedExpressionError(
                '%s expects %s argument(s), got %d' % (self.name, expected, count))

    def apply(self, args, context):
        raise NotImplementedError


class FunctionRegistry(object):
    def __init__(self, functions=None):
        self._functions = {}
        for function in functions or []:
            self.register(function)

    def __contains__(self, name):
        return name in self._functions

    def __iter__(self):
        return iter(self._functions.values())

    def register(self, function):
        if not function.name:
            raise ValueError('function %r has no name' % function)
        self._functions[function.name] = function
        return function

    def get(self, name):
        try:
            return self._functions[name]
        except KeyError:
            raise UnknownFunctionError(name) from None
