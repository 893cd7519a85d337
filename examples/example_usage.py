"""Walk through the econops client: a PCA call, a repeat, cache management.

Run with ``ECONOPS_TOKEN`` set::

    python examples/example_usage.py
"""

from __future__ import annotations

from econops import Client, callsignature
from econops.exceptions import EconopsError


def main() -> None:
    payload = {
        "data": [[1, 2, 3], [4, 5, 6], [7, 8, 9]],
        "n_components": 2,
    }
    print("Signature:", callsignature("/compute/pca", payload))

    try:
        with Client() as client:
            response = client.request("/compute/pca", payload)
            if response.status_code == 200:
                print("Explained variance:", response.json().get("explained_variance"))
            else:
                print("Error:", response.status_code, response.text)

            info = client.cache_info()
            print(f"Cache: {info.count} response(s), {info.total_bytes} bytes in {info.directory}")
            print("Cleared", client.clear_cache(), "cached response(s)")
    except EconopsError as exc:
        print("Request failed:", exc)
        raise SystemExit(exc.exit_code) from None


if __name__ == "__main__":
    main()
