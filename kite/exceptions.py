class KiteError(Exception):
    """Base class for every error raised while running a scenario."""

    def __init__(self, message, expression=None):
        super(KiteError, self).__init__(message)
        self.message = message
        self.expression = expression

    def with_expression(self, expression):
        # the innermost expression is the most useful one to report
        if self.expression is None:
            self.expression = expression
        return self

    def __str__(self):
        if self.expression:
            return '%s (in %s)' % (self.message, self.expression)
        return self.message


class UnknownFunctionError(KiteError):
    def __init__(self, name):
        super(UnknownFunctionError, self).__init__('Unknown function: %s' % name)
        self.name = name


class MalformedExpressionError(KiteError):
    pass


class MissingCaptureError(KiteError):
    def __init__(self, message, name):
        super(MissingCaptureError, self).__init__(message)
        self.name = name


class FieldMissingError(KiteError):
    def __init__(self, message, path=None, object_name=None):
        super(FieldMissingError, self).__init__(message)
        self.path = path
        self.object_name = object_name


class PathNotFoundError(FieldMissingError):
    pass


class InvalidPathError(KiteError):
    def __init__(self, message, path=None, object_name=None):
        super(InvalidPathError, self).__init__(message)
        self.path = path
        self.object_name = object_name


class UnknownSubFunctionError(KiteError):
    def __init__(self, suffix):
        super(UnknownSubFunctionError, self).__init__(
            'Cannot find additional lookup function for: %s' % suffix)
        self.suffix = suffix


class DeserializationError(KiteError):
    pass


class SerializationError(KiteError):
    pass


class FunctionError(KiteError):
    """A registered function failed with an error that is not a KiteError."""


class ScenarioError(KiteError):
    pass


class CheckError(KiteError, AssertionError):
    def __init__(self, message, command_name=None, diffs=None):
        super(CheckError, self).__init__(message)
        self.command_name = command_name
        self.diffs = diffs or []
