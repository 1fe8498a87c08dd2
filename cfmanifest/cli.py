"""Command line entry point: build the manifest and write it to stdout as YAML."""

import argparse
import sys

from cfmanifest.common.config import Settings
from cfmanifest.common.errors import ManifestError
from cfmanifest.common.logging_config import LOGGER, configure_logging
from cfmanifest.manifest.builder import build_manifest
from cfmanifest.manifest.serialize import dump_manifest


def parse_args(argv=None, settings: Settings = None):
    settings = settings or Settings()
    ap = argparse.ArgumentParser(
        prog="cf-manifest-gen",
        description="Generate URIs, secrets and etcd TLS certificates for a deployment manifest",
    )
    ap.add_argument("--dns-base", default=settings.dns_base, help="DNS base name, e.g. example.com")
    ap.add_argument("--env", default=settings.env, help="Short name for environment, e.g. myenv")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    args = parse_args(argv, settings)

    try:
        LOGGER.info("generating manifest for env=%s dns-base=%s", args.env, args.dns_base)
        out = dump_manifest(build_manifest(dns_base=args.dns_base, env=args.env))
    except ManifestError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        LOGGER.debug("unexpected failure", exc_info=True)
        print(f"error: unexpected {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    try:
        sys.stdout.write(out)
        sys.stdout.flush()
    except OSError as e:
        print(f"error: writing manifest: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
