"""Response classification shared by every outbound call.

A 2xx response yields its parsed JSON body; anything else is turned into an
:class:`~sdk.exceptions.APIException` carrying the status code, the standard
phrase and whatever human message the backend put in the error body.
"""

from typing import Any, Dict

import requests

from sdk.exceptions import APIException, status_phrase


def _json_body(response: requests.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def backend_message(response: requests.Response) -> str:
    """Extract the backend-supplied error message from *response*.

    Looks for ``message``, then ``errors[].message``, then
    ``error_description`` in a JSON object body.  A non-JSON body is used
    verbatim.  Returns ``""`` when there is nothing useful.
    """
    body = _json_body(response)
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        errors = body.get("errors")
        if isinstance(errors, list):
            parts = [
                str(err.get("message")).strip()
                for err in errors
                if isinstance(err, dict) and err.get("message")
            ]
            if parts:
                return "; ".join(parts)
        description = body.get("error_description")
        if isinstance(description, str) and description.strip():
            return description.strip()
        return ""
    if body is not None:
        return ""
    try:
        return response.text.strip()
    except (UnicodeDecodeError, LookupError):
        return ""


def parse_response(response: requests.Response) -> Dict[str, Any]:
    """Return the JSON body of a successful response.

    Empty or non-JSON bodies of a 2xx response come back as ``{}``.

    Raises:
        APIException: If the response status code is not 2xx.
    """
    status_code = response.status_code
    if not 200 <= status_code < 300:
        body = _json_body(response)
        raise APIException(
            status_code,
            message=backend_message(response),
            response_body=body if isinstance(body, dict) else None,
            phrase=status_phrase(status_code, response.reason or ""),
        )
    body = _json_body(response)
    return body if isinstance(body, dict) else {}
