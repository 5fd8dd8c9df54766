"""
HTTP client for the MillPanel API.

Every request carries a timeout chosen per endpoint family. A request that
times out is retried once immediately; a second timeout surfaces as
PanelClientError. Error responses surface as PanelAPIError carrying the
server's message.
"""
import logging

import requests

logger = logging.getLogger('millpanel.client')

DEFAULT_BASE_URL = 'http://127.0.0.1:8000/api/v1'

MIN_TIMEOUT = 3
MAX_TIMEOUT = 15
DEFAULT_TIMEOUT = 10

# Seconds, keyed by the first path segment
ENDPOINT_TIMEOUTS = {
    'health': 3,
    'auth': 10,
    'qualities': 5,
    'parties': 5,
    'labs': 8,
    'logs': 10,
    'orders': 15,
    'dashboard': 15,
    'mill-outputs': 15,
}


class PanelClientError(Exception):
    """The request never produced a response (timeout or connection failure)"""


class PanelAPIError(PanelClientError):
    """The server answered with an error status"""

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload


def timeout_for(path):
    """Timeout in seconds for an API path such as 'orders/12/'"""
    segment = path.strip('/').split('/', 1)[0]
    timeout = ENDPOINT_TIMEOUTS.get(segment, DEFAULT_TIMEOUT)
    return max(MIN_TIMEOUT, min(MAX_TIMEOUT, timeout))


class PanelClient:
    def __init__(self, base_url=DEFAULT_BASE_URL, token=None, session=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.session.headers.update({'Content-Type': 'application/json'})
        self.token = None
        if token:
            self.set_token(token)

    def set_token(self, token):
        self.token = token
        self.session.headers.update({'Authorization': f'Bearer {token}'})

    def url(self, path):
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(self, method, path, params=None, json=None, timeout=None):
        """Send one request, retrying exactly once if it times out"""
        timeout = timeout or timeout_for(path)
        url = self.url(path)
        attempts = 0
        while True:
            attempts += 1
            try:
                response = self.session.request(method, url, params=params, json=json, timeout=timeout)
                break
            except requests.exceptions.Timeout:
                if attempts >= 2:
                    logger.warning(f"{method} {url} timed out twice after {timeout}s")
                    raise PanelClientError(f'Request timeout ({timeout}s)')
                logger.info(f"{method} {url} timed out, retrying")
            except requests.exceptions.RequestException as e:
                raise PanelClientError(f'Network error: {e}') from e
        return self._handle(response)

    def _handle(self, response):
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = None
            if isinstance(payload, dict):
                message = payload.get('message') or payload.get('detail')
            raise PanelAPIError(
                message or f'Request failed with status {response.status_code}',
                status_code=response.status_code, payload=payload,
            )
        return payload

    def login(self, username, password):
        data = self.request('POST', 'auth/login/', json={'username': username, 'password': password})
        self.set_token(data['access'])
        return data

    def list(self, resource, **params):
        return self.request('GET', f'{resource}/', params=params or None)

    def get(self, resource, pk):
        return self.request('GET', f'{resource}/{pk}/')

    def create(self, resource, data):
        return self.request('POST', f'{resource}/', json=data)

    def update(self, resource, pk, data, partial=False):
        return self.request('PATCH' if partial else 'PUT', f'{resource}/{pk}/', json=data)

    def delete(self, resource, pk):
        return self.request('DELETE', f'{resource}/{pk}/')
