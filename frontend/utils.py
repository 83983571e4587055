# frontend/utils.py

import requests
from flask import current_app

def api_request(endpoint, method='GET', json=None, params=None):
    """
    Helper that calls the inventory API. Returns the response, or None when
    the API cannot be reached.
    """
    api_base_url = current_app.config.get('API_BASE_URL', 'http://localhost:8000/api')
    url = f"{api_base_url}{endpoint}"

    try:
        if method == 'GET':
            response = requests.get(url, timeout=10, params=params)
        elif method == 'POST':
            response = requests.post(url, json=json, timeout=10)
        elif method == 'PUT':
            response = requests.put(url, json=json, timeout=10)
        elif method == 'PATCH':
            response = requests.patch(url, json=json, timeout=10)
        elif method == 'DELETE':
            response = requests.delete(url, timeout=10)
        else:
            raise ValueError(f"Unsupported method: {method}")

        current_app.logger.info(f"API Request: {method} {url} - Status: {response.status_code}")
        return response

    except requests.exceptions.RequestException as e:
        current_app.logger.error(f"Request error {method} {url}: {e}")
        return None


def api_error_message(response, default="Unexpected error."):
    """Pulls the API's error message out of a failed response."""
    if response is None:
        return "Cannot reach the inventory server. Is it running?"
    try:
        error = response.json().get("error")
    except (ValueError, AttributeError):
        error = None
    return error or f"{default} (status {response.status_code})"
