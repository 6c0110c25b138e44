# src/collection_diff/connectivity/decorators.py

from functools import wraps
import requests
from ..exceptions import (
    RemoteError,
    RemoteConnectionError,
    AuthenticationError,
    RateLimitError,
    InvalidRequestError,
    BadResponseError,
)


def _response_payload(response):
    if response is None:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def handle_api_errors(func):
    """
    A decorator to handle common API request errors and wrap them in RemoteError subclasses.

    Errors already raised as RemoteError pass through untouched.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except RemoteError:
            raise
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            payload = _response_payload(e.response)
            if status == 401 or status == 403:
                raise AuthenticationError(f"Authentication failed: {e}", payload) from e
            elif status == 429:
                raise RateLimitError(f"Rate limit exceeded: {e}", payload) from e
            elif status is not None and 400 <= status < 500:
                raise InvalidRequestError(f"Invalid request: {e}", payload) from e
            else:
                raise RemoteError(f"HTTP error occurred: {e}", payload) from e
        except requests.exceptions.RequestException as e:
            raise RemoteConnectionError(f"Connection error: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as e:
            # Catches issues with parsing the response (e.g., missing keys)
            raise BadResponseError(f"Failed to parse response: {e}") from e

    return wrapper
