"""CLI for bucketdeploy."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Sequence

from loguru import logger

from bucketdeploy import __version__
from bucketdeploy.deploy import deploy
from bucketdeploy.exceptions import ConfigurationError, DeployError, StorageError
from bucketdeploy.logging_config import LOG_LEVELS, setup_logging
from bucketdeploy.settings import DEFAULT_REGION, DeploySettings

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bucketdeploy",
        description="Deploy a local directory to an object-storage bucket under a timestamp prefix",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="INFO",
        help="Log level (default: INFO)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines on stderr")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)
    deploy_parser = subparsers.add_parser(
        "deploy",
        help="Deploys the provided directory",
        description="Uploads all files from the provided directory, including deeply nested files.",
    )
    deploy_parser.add_argument("-s", "--source", required=True, help="Source directory to read from")
    deploy_parser.add_argument("-b", "--bucket", required=True, help="S3 bucket to deploy to")
    deploy_parser.add_argument("-k", "--key", default="", help="AWS key")
    deploy_parser.add_argument("-x", "--secret", default="", help="AWS secret")
    deploy_parser.add_argument("-r", "--region", default=DEFAULT_REGION, help=f"AWS region (default: {DEFAULT_REGION})")
    deploy_parser.add_argument("--endpoint-url", help="S3-compatible endpoint URL (e.g. MinIO)")
    deploy_parser.add_argument(
        "--local-root",
        type=Path,
        help="Deploy into a local directory store (one subdirectory per bucket) instead of S3",
    )
    deploy_parser.set_defaults(handler=run_deploy)
    return parser


def describe_error(exc: DeployError) -> str:
    """Message plus the cause and any other details, for the fatal log line."""
    details = dict(exc.details)
    text = exc.message
    reason = details.pop("reason", None)
    if reason:
        text = f"{text}: {reason}"
    if details:
        text += " (" + ", ".join(f"{key}={value}" for key, value in details.items()) + ")"
    return text


def run_deploy(args: argparse.Namespace) -> int:
    try:
        settings = DeploySettings.build(
            source=args.source,
            bucket=args.bucket,
            key=args.key,
            secret=args.secret,
            region=args.region,
            endpoint_url=args.endpoint_url,
            local_root=args.local_root,
        )
        result = deploy(settings)
    except (ConfigurationError, StorageError) as exc:
        logger.bind(**exc.details).error("{}", describe_error(exc))
        return EXIT_CONFIG_ERROR

    if not result.ok:
        return EXIT_PARTIAL_FAILURE
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, json_format=args.json_logs, log_file=args.log_file)

    return args.handler(args)


if __name__ == "__main__":
    raise SystemExit(main())
