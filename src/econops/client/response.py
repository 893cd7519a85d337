"""Printing API responses for the CLI.

HTTP 200 bodies are printed to stdout as indented JSON. Any other status is
reported on stderr as ``Error: <status>`` and the raw body is echoed to
stdout so that server error details are not lost.
"""

from __future__ import annotations

from typing import Any

import httpx

from econops.output import get_output


def format_api_response(response: httpx.Response) -> bool:
    """Print *response*; returns ``True`` when its status was 200."""
    output = get_output()
    if response.status_code == 200:
        data = extract_response_data(response)
        if data is not None:
            output.format_response(data)
        return True

    output.error(str(response.status_code))
    if response.content:
        output.print_data(response.text)
    return False


def extract_response_data(response: httpx.Response) -> Any:
    """Parsed JSON body, the text body if it is not JSON, or ``None`` if empty."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text
