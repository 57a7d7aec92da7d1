import logging

http_logger = logging.getLogger('kite.http')


class LoggingHandler(object):
    """Writes every request and response in raw HTTP form to ``kite.http``."""

    def __init__(self, logger=None, level=logging.INFO):
        self.logger = logger or http_logger
        self.level = level

    def format_request(self, request):
        msg = []
        msg.append('{0} {1} HTTP/1.1'.format(request.method, request.url))
        for k, v in request.headers.items():
            msg.append('{0}: {1}'.format(k, v))
        if request.body:
            body = request.body
            if isinstance(body, bytes):
                body = body.decode('utf-8', 'replace')
            msg.append('')
            msg.append(body)

        return '\n'.join(msg)

    def format_response(self, response):
        msg = []
        msg.append('HTTP/1.1 {0} {1}'.format(response.status_code, response.reason))
        for k, v in response.headers.items():
            msg.append('{0}: {1}'.format(k, v))
        msg.append('')
        msg.append(response.text)

        return '\n'.join(msg)

    def on_request(self, command, request):
        self.logger.log(self.level, '===Request %s===\n%s', command.name, self.format_request(request))

    def on_response(self, command, request, response):
        self.logger.log(self.level, '===Response %s===\n%s', command.name, self.format_response(response))
