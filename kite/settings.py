import os

DEFAULTS = {
    'BASE_URL': None,
    'SCENARIO_DIRECTORY': '.',
    'REQUEST_TIMEOUT': 30.0,
    'MAX_EXPANSION_DEPTH': 32,
}

ENV_PREFIX = 'KITE_'


def environ_settings(environ=None, defaults=None):
    """Collect ``KITE_*`` overrides, coerced to the type of their default."""
    environ = os.environ if environ is None else environ
    defaults = DEFAULTS if defaults is None else defaults

    found = {}
    for attr, default in defaults.items():
        key = ENV_PREFIX + attr
        if key not in environ:
            continue
        value = environ[key]
        if isinstance(default, bool):
            value = value.lower() in ('1', 'true', 'yes')
        elif isinstance(default, (int, float)):
            value = type(default)(value)
        found[attr] = value
    return found


class Settings(object):
    """Settings resolved from explicit values, then ``KITE_*`` variables, then ``DEFAULTS``."""

    def __init__(self, user_settings=None, defaults=None, environ=None):
        self.defaults = DEFAULTS if defaults is None else defaults
        user_settings = user_settings or {}

        unknown = set(user_settings) - set(self.defaults)
        if unknown:
            raise AttributeError('Invalid setting: %s' % ', '.join(sorted(unknown)))

        self._values = dict(self.defaults)
        self._values.update(environ_settings(environ, self.defaults))
        self._values.update(user_settings)

    def __getattr__(self, attr):
        values = self.__dict__.get('_values', {})
        if attr not in values:
            raise AttributeError('Invalid setting: %s' % attr)
        return values[attr]


settings = Settings()
