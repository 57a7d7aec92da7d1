import logging
import os
from urllib.parse import urlparse

import requests
from requests import Request

from kite.checks import check_body, check_status
from kite.context import KiteContext
from kite.exceptions import KiteError
from kite.functions import default_registry
from kite.log import LoggingHandler
from kite.processor import ContextProcessor
from kite.scenario import Scenario, parse_command
from kite.settings import settings as default_settings
from kite.version import VERSION_STRING

__license__ = 'MIT'
__version__ = VERSION_STRING

logger = logging.getLogger(__name__)


class Command(object):
    """One HTTP command of a scenario, with its templates already expanded."""

    def __init__(self, info, processor, base_url=None):
        info = parse_command(info)
        self.name = info.name
        self.description = info.description
        self.method = info.verb
        self.base_url = base_url
        self.url = self.get_full_url(processor.expand(info.uri))

        self.headers = {}
        for k, v in info.headers.items():
            self.headers[k] = processor.expand(str(v))

        self.body = None
        if info.body is not None:
            body = info.body
            if not isinstance(body, str):
                body = processor.context.codec.dumps(body)
            self.body = processor.expand(body)

        self.expected_status = info.expected_status
        self.expected_body = info.expected_body
        self.prepared_request = None

    def get_full_url(self, partial_url):
        u = urlparse(partial_url)

        if self.base_url and not u.scheme:
            u = urlparse('%s/%s' % (self.base_url.rstrip('/'), partial_url.lstrip('/')))

        return u.geturl()

    def prepare(self, content_type='application/json'):
        headers = {}
        if self.body is not None and content_type:
            headers['Content-Type'] = content_type
        headers.update(self.headers)

        raw_req = Request(
            method=self.method,
            url=self.url,
            headers=headers,
            data=self.body.encode('utf-8') if self.body is not None else None,
        )

        self.prepared_request = raw_req.prepare()

        return self.prepared_request

    def run(self, session, timeout=None):
        if not self.prepared_request:
            raise KiteError('run() called before prepare()')

        resp = session.send(self.prepared_request, timeout=timeout)

        return resp.request, resp


class ScenarioRunner(object):
    """Executes scenario files command by command.

    Handlers are objects with optional ``on_request(command, request)`` and
    ``on_response(command, request, response)`` hooks. The context itself is
    always the first handler so later commands can refer to earlier ones.
    """
    command_class = Command
    logging_class = LoggingHandler
    extra_handlers = []

    def __init__(self, base_url=None, functions=None, session=None, settings=None):
        self.settings = settings or default_settings
        self.base_url = base_url or self.settings.BASE_URL
        self.functions = functions if functions is not None else default_registry()
        self.session = session or requests.Session()

        handlers = []
        if self.logging_class:
            handlers.append(self.logging_class())
        self.handlers = handlers + [handler() for handler in self.extra_handlers]

    def resolve_path(self, path):
        if os.path.isabs(path) or os.path.exists(path):
            return path
        return os.path.join(self.settings.SCENARIO_DIRECTORY, path)

    def execute(self, path, context=None):
        """Run the scenario at ``path`` and return the populated context.

        Passing the context returned by a previous call keeps its captures,
        including any the caller added or overrode in between.
        """
        if context is None:
            context = KiteContext()

        processor = ContextProcessor(context, self.functions, self.settings.MAX_EXPANSION_DEPTH)
        self._execute_file(self.resolve_path(path), processor, set())
        return context

    def _execute_file(self, path, processor, executed):
        path = os.path.abspath(path)
        if path in executed:
            return
        executed.add(path)

        scenario = Scenario.load(path)
        for dependency in scenario.dependencies:
            self._execute_file(dependency, processor, executed)

        logger.info('executing scenario %s: %s', path, scenario.description)
        # declared in order so a variable can refer to the ones before it
        for name, value in scenario.variables.items():
            processor.context.add_variable(name, processor.expand_value(value))

        for info in scenario.commands:
            self.run_command(info, processor)

    def run_command(self, info, processor):
        context = processor.context
        command = self.command_class(info, processor, self.base_url)
        logger.info('running command %s: %s %s', command.name, command.method, command.url)

        prepared_request = command.prepare()
        for handler in self.handlers:
            if hasattr(handler, 'on_request'):
                handler.on_request(command, prepared_request)

        request, response = command.run(self.session, self.settings.REQUEST_TIMEOUT)

        for handler in [context] + self.handlers:
            if hasattr(handler, 'on_response'):
                handler.on_response(command, request, response)

        check_status(command, response)
        check_body(command, self._extract_body(response), processor)
        return response

    def _extract_body(self, response):
        try:
            return response.json()
        except ValueError:
            return response.text


__all__ = [
    'Command',
    'ContextProcessor',
    'KiteContext',
    'ScenarioRunner',
]
