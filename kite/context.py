from kite.exceptions import DeserializationError
from kite.formats import JSON


class KiteContext(object):
    """Captured state shared by the commands of one or more scenarios.

    Bodies and locations are keyed by command name, variables by the name
    declared in the scenario. Adding an entry under an existing name replaces
    it, which lets test code override what a previous command captured.
    """

    def __init__(self, codec=None):
        self.codec = codec or JSON()
        self._bodies = {}
        self._locations = {}
        self._variables = {}

    def __contains__(self, name):
        return name in self._bodies

    def on_response(self, command, request, response):
        self.add_body(command.name, response.text)

        location = response.headers.get('Location')
        if location:
            self.add_location(command.name, location)

    def add_body(self, name, body):
        self._bodies[name] = body

    def add_body_as_json_string(self, name, value):
        self._bodies[name] = self.codec.dumps(value)

    def has_body(self, name):
        return name in self._bodies

    def get_body(self, name):
        return self._bodies.get(name)

    def get_body_as(self, name, type_):
        body = self._bodies.get(name)
        if body is None:
            raise DeserializationError('No payload found for %s' % name)
        return self.codec.bind(body, type_)

    def add_location(self, name, url):
        self._locations[name] = url

    def get_location(self, name):
        return self._locations.get(name)

    def add_variable(self, name, value):
        if not isinstance(value, str):
            value = self.codec.dumps(value)
        self._variables[name] = value

    def get_variable(self, name):
        return self._variables.get(name)

    def update_variables(self, variables):
        for name, value in variables.items():
            self.add_variable(name, value)
