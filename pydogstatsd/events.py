"""
Datadog event submission over HTTP.

Events do not go through dogstatsd: they are POSTed as JSON to the events API.
This is slow compared to the UDP path, avoid calling it in a tight loop.
"""
import json
from collections import namedtuple

import requests

from pydogstatsd.log import logger

__all__ = ['EventClient', 'EventResult', 'build_event_body']

EVENT_URL = '/api/v1/events'


class EventResult(namedtuple('EventResult', ['ok', 'status_code', 'error'])):
    """Outcome of one submission. Failures are reported here, never raised."""

    def __bool__(self):
        return self.ok


def build_event_body(title, vals=None):
    body = dict(vals or {})
    body['title'] = title
    tags = body.get('tags')
    if isinstance(tags, str):
        body['tags'] = [tag.strip() for tag in tags.split(',')]
    return body


class EventClient(object):
    def __init__(self, api_key=None, application_key=None, endpoint='https://app.datadoghq.com', timeout=10):
        self.api_key = api_key
        self.application_key = application_key
        self.endpoint = endpoint.rstrip('/')
        self.timeout = timeout

    @property
    def url(self):
        return '{}{}'.format(self.endpoint, EVENT_URL)

    def submit(self, title, vals=None):
        if not self.api_key or not self.application_key:
            logger.warning('event not sent, api_key and application_key are required', title=title)
            return EventResult(False, None, ValueError('missing api_key or application_key'))
        body = json.dumps(build_event_body(title, vals))
        params = {'api_key': self.api_key, 'application_key': self.application_key}
        try:
            resp = requests.post(self.url, params=params, data=body,
                                 headers={'Content-Type': 'application/json'}, timeout=self.timeout)
        except requests.RequestException as ex:
            logger.exception('event submission failed', title=title)
            return EventResult(False, None, ex)

        if resp.status_code >= 400:
            logger.error('event submission rejected', title=title, status_code=resp.status_code)
            return EventResult(False, resp.status_code, None)
        return EventResult(True, resp.status_code, None)
