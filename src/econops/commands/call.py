"""Request commands -- one-shot ``call`` and the ``interactive`` prompt.

Both commands are thin wrappers around :meth:`econops.client.Client.request`
and print results through :func:`~econops.client.response.format_api_response`.
"""

from __future__ import annotations

import sys
from typing import Optional

import typer

from econops.client.response import format_api_response
from econops.commands.shared import create_client, fail, parse_payload
from econops.exceptions import EconopsError
from econops.output import get_output

_PROMPT = "econops> "
_EXIT_WORDS = ("quit", "exit")


def call_command(
    ctx: typer.Context,
    route: str = typer.Argument(help="API route, e.g. /compute/pca."),
    payload: Optional[str] = typer.Argument(
        None, help="JSON request payload, e.g. '{\"data\": [[1, 2]], \"n_components\": 1}'."
    ),
    method: str = typer.Option(
        "POST", "--method", "-X", help="HTTP method for requests without a payload."
    ),
) -> None:
    """Send one request and print the result.

    Prints the pretty-printed JSON body on HTTP 200, otherwise
    ``Error: <status>`` followed by the raw body.

    Example::

        econops call /compute/pca '{"data": [[1, 2], [3, 4]], "n_components": 1}'
        econops call /health -X GET
    """
    try:
        data = parse_payload(payload)
        with create_client(ctx) as client:
            response = client.request(route, data, method=method)
            format_api_response(response)
    except EconopsError as exc:
        fail(exc)


def interactive_command(ctx: typer.Context) -> None:
    """Read ``route [json_payload]`` lines and send each as a request.

    The loop ends on ``quit``, ``exit`` or end of input. Errors are reported
    and the loop continues.
    """
    output = get_output()
    output.info("EconOps API Interactive CLI")
    output.info("Type 'quit' to exit")

    try:
        client = create_client(ctx)
    except EconopsError as exc:
        fail(exc)

    with client:
        while True:
            output.prompt(_PROMPT)
            line = sys.stdin.readline()
            if not line:
                break
            line = line.strip()
            if line in _EXIT_WORDS:
                break
            if not line:
                continue

            route, _, payload_text = line.partition(" ")
            try:
                data = parse_payload(payload_text)
                response = client.request(route, data)
                format_api_response(response)
            except EconopsError as exc:
                output.error(str(exc))

    output.info("Goodbye!")
