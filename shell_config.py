#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Loads the shell configuration (YAML).

The file is first rendered by Jinja2, then interpreted as YAML and
validated. The process environment is available to the template as
`env`, e.g. `uri: {{ env.DATAFLOW_URI | default('http://localhost:9393') }}`.
The directory of the file is the template directory, so including and
extending other files is possible.

Example:

    server:
      uri: http://localhost:9393
      timeout: 30
      page_size: 100
    properties_encoding: latin-1
    color: true
"""

import codecs
import copy
import os

import jinja2
import schema
import yaml

from errors import ConfigurationError


DEFAULT_CONFIG_FILE = '~/.dfsh.yaml'

DEFAULTS = {
    'server': {
        'uri': 'http://localhost:9393',
        'timeout': 30,
        'page_size': 100,
    },
    'properties_encoding': 'latin-1',
    'color': True,
}


def _is_codec(name: str) -> bool:
    try:
        codecs.lookup(name)
    except LookupError:
        return False
    return True


CONFIG_SCHEMA = schema.Schema({
    schema.Optional('server'): {
        schema.Optional('uri'): schema.And(str, len, error='"server.uri" must be a non-empty string'),
        schema.Optional('timeout'): schema.And(schema.Or(int, float), lambda n: n > 0,
                                               error='"server.timeout" must be a number greater than 0'),
        schema.Optional('page_size'): schema.And(int, lambda n: n >= 1,
                                                 error='"server.page_size" must be an integer greater than 0'),
    },
    schema.Optional('properties_encoding'): schema.And(str, _is_codec,
                                                       error='"properties_encoding" must name a known encoding'),
    schema.Optional('color'): bool,
}, ignore_extra_keys=False)


def render(file: str) -> dict:
    """
    Renders the file with Jinja2 and parses the result as YAML.
    An empty file results in an empty dictionary.
    """
    try:
        dirname, filename = os.path.split(file)
        env = jinja2.Environment(loader=jinja2.FileSystemLoader(dirname or '.'))
        template = env.get_template(filename)
        content = yaml.safe_load(template.render(env=os.environ))
    except (OSError, jinja2.TemplateError, yaml.YAMLError) as err:
        raise ConfigurationError(f'Error reading configuration "{file}": {err}') from err
    return content or {}


def validate(config: dict, file: str = '') -> dict:
    """
    Validates the configuration against the schema.
    """
    try:
        return CONFIG_SCHEMA.validate(config)
    except schema.SchemaError as se:
        msgs = [f'Errors during validation of configuration "{file}":']
        for err in se.errors + se.autos:
            if err:
                msgs.append(err)
        raise ConfigurationError('\n\t'.join(msgs)) from se


def load_config(file: str = None) -> dict:
    """
    Returns the configuration from `file` merged over the defaults.
    A missing default file results in the defaults, a missing file
    given explicitly is an error.
    """
    config = copy.deepcopy(DEFAULTS)
    path = os.path.expanduser(file or DEFAULT_CONFIG_FILE)
    if not os.path.exists(path):
        if file:
            raise ConfigurationError(f'Configuration file "{path}" does not exist.')
        return config

    content = validate(render(path), path)
    config['server'].update(content.pop('server', None) or {})
    config.update(content)
    return config
