import json
import os
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from kite.exceptions import ScenarioError

VERBS = ('GET', 'POST', 'PUT', 'PATCH', 'DELETE')


class CommandInfo(BaseModel):
    """One entry of a scenario's ``commands`` list, before templates are expanded."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(min_length=1)
    verb: str
    uri: str = Field(min_length=1)
    description: str = ''
    headers: Dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    expected_status: Optional[int] = Field(default=None, alias='expectedStatus')
    expected_body: Any = Field(default=None, alias='expectedBody')

    @field_validator('verb')
    @classmethod
    def known_verb(cls, verb):
        verb = verb.upper()
        if verb not in VERBS:
            raise ValueError('unsupported verb %s' % verb)
        return verb


class ScenarioInfo(BaseModel):
    description: str = ''
    variables: Dict[str, Any] = Field(default_factory=dict)
    dependencies: List[str] = Field(default_factory=list)
    commands: List[CommandInfo]


def parse_command(info):
    if isinstance(info, CommandInfo):
        return info
    try:
        return CommandInfo.model_validate(info)
    except ValidationError as e:
        raise ScenarioError('Invalid command: %s' % e) from e


class Scenario(object):
    """A scenario file: variables, dependencies and an ordered command list."""

    def __init__(self, info, path=None):
        try:
            model = ScenarioInfo.model_validate(info)
        except ValidationError as e:
            raise ScenarioError('Invalid scenario %s: %s' % (path or '<inline>', e)) from e

        self.path = path
        self.description = model.description
        self.variables = model.variables

        base_dir = os.path.dirname(path) if path else ''
        self.dependencies = [os.path.join(base_dir, dep) for dep in model.dependencies]
        self.commands = model.commands

    @classmethod
    def load(cls, path):
        try:
            with open(path) as f:
                info = json.load(f)
        except OSError as e:
            raise ScenarioError('Cannot read scenario %s: %s' % (path, e)) from e
        except ValueError as e:
            raise ScenarioError('Scenario %s is not valid JSON: %s' % (path, e)) from e
        return cls(info, path=path)
