#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
REST client for the stream endpoints of a Data Flow server.

Endpoints used (relative to the server URI):

    GET    /                              server check
    GET    /streams/definitions           paged stream list (HAL)
    POST   /streams/definitions           create (name, definition, deploy)
    DELETE /streams/definitions[/NAME]    destroy one or all
    POST   /streams/deployments/NAME      deploy (properties)
    DELETE /streams/deployments[/NAME]    undeploy one or all
"""

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

import requests

from deployment_properties import format_properties
from errors import RemoteOperationError


DEFAULT_TIMEOUT = 30
DEFAULT_PAGE_SIZE = 100


@dataclass
class StreamDefinitionResource:
    """A stream definition as reported by the server."""
    name: str
    dsl_text: str
    status: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict) -> 'StreamDefinitionResource':
        return cls(name=data.get('name'), dsl_text=data.get('dslText'), status=data.get('status'))


def _error_message(response: requests.Response) -> str:
    """
    Extracts the server's error message. The server answers with VndErrors
    (a list of {logref, message}) or a single object with a message.
    """
    try:
        body = response.json()
    except ValueError:
        return response.reason or 'Request failed'
    if isinstance(body, list):
        messages = [entry.get('message') for entry in body if isinstance(entry, dict) and entry.get('message')]
        if messages:
            return '; '.join(messages)
    elif isinstance(body, dict) and body.get('message'):
        return body['message']
    return response.reason or 'Request failed'


class StreamTemplate:
    """
    The stream operations of a Data Flow server.
    """

    def __init__(self, session: requests.Session, base_uri: str, timeout: float = DEFAULT_TIMEOUT,
                 page_size: int = DEFAULT_PAGE_SIZE):
        self.session = session
        self.base_uri = base_uri.rstrip('/')
        self.timeout = timeout
        self.page_size = page_size

    def _url(self, *parts: str) -> str:
        return '/'.join([self.base_uri] + [quote(part, safe='/') for part in parts])

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as err:
            raise RemoteOperationError(f'Could not reach Data Flow server at {self.base_uri}: {err}') from err
        if not response.ok:
            raise RemoteOperationError(_error_message(response), response.status_code)
        return response

    def check_server(self) -> None:
        """
        Raises RemoteOperationError if the server does not answer.
        """
        self._request('GET', f'{self.base_uri}/')

    def list(self) -> list:
        """
        Returns all stream definitions, following the `next` links
        until the last page has been read.
        """
        streams = []
        url = self._url('streams', 'definitions')
        params = {'page': 0, 'size': self.page_size}
        while url:
            response = self._request('GET', url, params=params)
            try:
                page = response.json()
            except ValueError as err:
                raise RemoteOperationError(f'Invalid response from Data Flow server at {url}: {err}',
                                           response.status_code) from err
            for resources in page.get('_embedded', {}).values():
                if isinstance(resources, list):
                    streams.extend(StreamDefinitionResource.from_json(resource) for resource in resources)
                    break
            url = page.get('_links', {}).get('next', {}).get('href')
            params = None
        return streams

    def create_stream(self, name: str, definition: str, deploy: bool = False) -> None:
        self._request('POST', self._url('streams', 'definitions'),
                      data={'name': name, 'definition': definition, 'deploy': str(deploy).lower()})

    def deploy(self, name: str, properties: dict) -> None:
        self._request('POST', self._url('streams', 'deployments', name),
                      data={'properties': format_properties(properties)})

    def undeploy(self, name: str) -> None:
        self._request('DELETE', self._url('streams', 'deployments', name))

    def undeploy_all(self) -> None:
        self._request('DELETE', self._url('streams', 'deployments'))

    def destroy(self, name: str) -> None:
        self._request('DELETE', self._url('streams', 'definitions', name))

    def destroy_all(self) -> None:
        self._request('DELETE', self._url('streams', 'definitions'))


class DataFlowTemplate:
    """
    Entry point to the operations of a Data Flow server.
    The server is checked on construction, so an instance always
    represents a server that has answered.
    """

    def __init__(self, uri: str, timeout: float = DEFAULT_TIMEOUT, page_size: int = DEFAULT_PAGE_SIZE,
                 session: requests.Session = None):
        self.uri = uri.rstrip('/')
        self.session = session or requests.Session()
        self.session.headers['Accept'] = 'application/json'
        self._streams = StreamTemplate(self.session, self.uri, timeout, page_size)
        self._streams.check_server()

    def stream_operations(self) -> StreamTemplate:
        return self._streams


class DataFlowShell:
    """
    Holds the connection to the Data Flow server.
    `operations` stays None until a connection has been established.
    """

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, page_size: int = DEFAULT_PAGE_SIZE):
        self.timeout = timeout
        self.page_size = page_size
        self.target_uri = None
        self.operations = None

    def connect(self, uri: str) -> DataFlowTemplate:
        """
        Connects to the server at `uri`. On failure the shell is left
        disconnected and the RemoteOperationError is raised.
        """
        self.target_uri = uri
        self.operations = None
        self.operations = DataFlowTemplate(uri, self.timeout, self.page_size)
        return self.operations
