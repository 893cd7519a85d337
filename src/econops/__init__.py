"""econops -- Python client for the EconOps statistical-computation API.

The client sends authenticated requests for remote computations such as
principal component analysis or time-series forecasting, signs every
request deterministically, and can cache responses on local disk.

Typical usage::

    from econops import Client

    client = Client(token="your_api_token")
    response = client.request("/compute/pca", {"data": [[1, 2], [3, 4]], "n_components": 1})

The ``econops`` console script offers one-shot (``econops call``) and
interactive (``econops interactive``) access to the same client.

Modules:
    app: Typer application and CLI entry point.
    client: The API client and response formatting.
    cache: Disk-backed response cache.
    signature: Canonical payload serialisation and request signatures.
    config: XDG-aware configuration and token resolution.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"

from econops.cache import ResponseCache  # noqa: E402
from econops.client import Client  # noqa: E402
from econops.signature import callsignature  # noqa: E402

__all__ = ["Client", "ResponseCache", "callsignature", "__version__"]
