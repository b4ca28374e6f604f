from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import find_default_config, load_config
from .errors import SdkgenError
from .pipeline import run, write_manifest


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="sdkgen", description="Generate TypeScript SDK artifacts from an OpenAPI spec.")
    parser.add_argument("-c", "--config", type=Path, help="Path to config file (default: search for sdkgen.config.py)")
    parser.add_argument("-t", "--types-config", type=Path, help="Customer config providing placeholder type values")
    parser.add_argument("--client", action="append", default=[], help="Only generate the named client(s)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config_path = args.config or find_default_config()
        if config_path is None:
            raise SdkgenError("No config file given and none found (looked for sdkgen.config.py)")
        config = load_config(config_path)
        if args.client:
            clients = [client for client in config.clients if client.name in args.client]
            if not clients:
                raise SdkgenError(f"No client named {', '.join(args.client)} in {config_path}")
            config = config.model_copy(update={"clients": clients})
        results = run(config, args.types_config)
        for client, artifacts in zip(config.clients, results):
            path = write_manifest(artifacts, client.out_dir)
            print(f"{client.name}: {path}")
    except SdkgenError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except FileNotFoundError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
