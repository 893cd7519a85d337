"""HTTP client module for econops.

Provides :class:`Client`, a blocking client backed by :class:`httpx.Client`
that adds bearer authentication, request signing and response caching, and
the :mod:`~econops.client.response` bridge that renders responses for the
CLI.

Example::

    from econops.client import Client

    with Client(token="your_api_token") as client:
        resp = client.request("/compute/pca", {"data": [[1, 2], [3, 4]], "n_components": 1})
"""

from econops.client.client import Client

__all__ = ["Client"]
