"""Check the admin connection and print the models the server exposes.

Run from the project root with ``python -m scripts.introspect_models``.
"""

from __future__ import annotations

import argparse
import json
import logging

from services.admin_api import AdminApiClient
from utils.config import load_settings
from utils.exceptions import NotAuthenticated, RequestFailed
from utils.logging_setup import configure_logging
from utils.session_store import SessionStore

log = logging.getLogger(__name__)


def describe_models(client: AdminApiClient, as_json: bool = False) -> int:
    try:
        models = client.introspect()
    except NotAuthenticated as exc:
        print(str(exc))
        return 2
    except RequestFailed as exc:
        print(f"Not connected: {exc}")
        return 1

    if as_json:
        payload = {
            "models": [
                {
                    "name": model.name,
                    "scalarFields": [
                        {"name": f.name, "type": f.type} for f in model.scalar_fields
                    ],
                }
                for model in models
            ]
        }
        print(json.dumps(payload, indent=2))
        return 0

    if not models:
        print("Connected; the server exposes no models.")
        return 0

    print(f"Connected; {len(models)} model(s):")
    for model in models:
        print(f"\n{model.name}")
        width = max((len(f.name) for f in model.scalar_fields), default=0)
        for f in model.scalar_fields:
            print(f"  {f.name.ljust(width)}  {f.type}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Test the admin connection and list the models it exposes."
    )
    parser.add_argument("--base-url", help="Admin server URL")
    parser.add_argument(
        "--token",
        help="Admin token (defaults to the token saved by the console)",
    )
    parser.add_argument("--json", action="store_true", help="Print raw JSON")
    parser.add_argument("--log-level", help="Logging level")
    args = parser.parse_args(argv)

    settings = load_settings().with_overrides(
        base_url=args.base_url,
        log_level=args.log_level.upper() if args.log_level else None,
    )
    configure_logging(settings.log_level)
    token = args.token or SessionStore.load().get()
    client = AdminApiClient(settings.base_url, lambda: token, timeout=settings.timeout)
    return describe_models(client, as_json=args.json)


if __name__ == "__main__":
    raise SystemExit(main())
