import json

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError, to_json

from kite.exceptions import DeserializationError, SerializationError


class JSON(object):
    """Shared JSON codec used for request bodies and captured payloads."""

    content_type = 'application/json'

    def format(self, value):
        if isinstance(value, str):
            return value
        return self.dumps(value)

    def dumps(self, value):
        try:
            return to_json(value).decode('utf-8')
        except PydanticSerializationError as e:
            raise SerializationError('Cannot serialize %r to JSON: %s' % (value, e)) from e

    def loads(self, text):
        return json.loads(text)

    def bind(self, text, type_):
        """Parse ``text`` and validate it into an instance of ``type_``.

        ``type_`` can be anything pydantic understands: a model, a dataclass,
        ``dict``, ``list[int]`` and so on.
        """
        type_name = getattr(type_, '__name__', type_)
        try:
            adapter = TypeAdapter(type_)
        except PydanticSchemaGenerationError as e:
            raise DeserializationError('Cannot bind payloads to %s: %s' % (type_name, e)) from e

        try:
            return adapter.validate_json(text)
        except ValidationError as e:
            raise DeserializationError('Cannot bind payload to %s: %s' % (type_name, e)) from e
