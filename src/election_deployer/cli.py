"""Command line interface for election-deployer."""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .accounts import env_lines, generate_account
from .artifacts import export_abis
from .client import JsonRpcChainClient
from .config import load_environment, resolve_rpc_url, usable_private_key, validate_config
from .constants import ARTIFACTS_DIR_ENV, DEPLOYMENTS_DIR_ENV
from .exceptions import ConfigError, InvalidNetworkNameError, RecordNotFoundError
from .networks import get_network_profile, known_networks
from .persistence import load_deployment_record
from .pipeline import PipelineResult, PipelineStatus, run_pipeline

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
    )


def _report_failure(result: PipelineResult) -> None:
    error = result.error
    print(f"[ERROR] Deployment to '{result.network}' failed ({result.status.value})", file=sys.stderr)
    if isinstance(error, ConfigError):
        print(f"   {error.missing_key} is {error.reason}. Set it in your .env file.", file=sys.stderr)
        if error.missing_key == "PRIVATE_KEY" and error.reason != "malformed":
            print("   Generate a new account: election-deploy generate-account", file=sys.stderr)
    elif error is not None:
        print(f"   {error}", file=sys.stderr)


def cmd_deploy(args: argparse.Namespace) -> int:
    """Run the deployment pipeline for one network."""
    env = load_environment(args.env_file)
    profile = get_network_profile(args.network)

    try:
        validate_config(profile, env)
        rpc_url = resolve_rpc_url(profile, env)
    except ConfigError as e:
        logger.error("Configuration error on %s: %s", args.network, e)
        _report_failure(PipelineResult(network=args.network, status=PipelineStatus.CONFIG_ERROR, error=e))
        return 1

    client = JsonRpcChainClient(
        rpc_url,
        artifacts_dir=args.artifacts_dir or env.get(ARTIFACTS_DIR_ENV),
        private_key=usable_private_key(env),
    )
    result = run_pipeline(
        args.network,
        env,
        client,
        deployments_root=args.deployments_dir or env.get(DEPLOYMENTS_DIR_ENV),
    )

    if not result.ok:
        _report_failure(result)
        return result.exit_code

    print("\n=== Deployment Summary ===")
    print(json.dumps(result.record.to_dict(), indent=2))
    print(f"\nDeployment info saved to: {result.record_path}")
    return result.exit_code


def cmd_generate_account(args: argparse.Namespace) -> int:
    """Generate a deployer account and print the .env lines for it."""
    account = generate_account()

    print("\n=== New Deployer Account ===\n")
    print(f"Address:     {account.address}")
    print(f"Private Key: {account.private_key}")
    print("\n[WARNING] Save the private key securely and never commit it to git.")
    print("\nAdd to .env file:")
    for line in env_lines(account):
        print(line)

    faucet_hint = get_network_profile(args.network).faucet_hint
    if faucet_hint:
        print(f"\nTo fund on {args.network}: {faucet_hint}")
    return 0


def cmd_copy_abi(args: argparse.Namespace) -> int:
    """Copy contract ABIs from the artifacts into the given directories."""
    exported = export_abis(args.destination, artifacts_dir=args.artifacts_dir)
    if not exported:
        print("[ERROR] No ABI files were exported", file=sys.stderr)
        return 1
    print(f"[SUCCESS] Copied ABI files for: {', '.join(exported)}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print the latest deployment record for a network."""
    try:
        record = load_deployment_record(args.network, args.deployments_dir)
    except (RecordNotFoundError, InvalidNetworkNameError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    print(json.dumps(record.to_dict(), indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="election-deploy",
        description="Deploy the election contract suite and record the addresses",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    network_help = f"Target network (known: {', '.join(known_networks())})"

    deploy = subparsers.add_parser("deploy", help="Deploy contracts to a network")
    deploy.add_argument("--network", "-n", default="localhost", help=network_help)
    deploy.add_argument("--env-file", default=None, help="Path to .env file (default: ./.env)")
    deploy.add_argument("--deployments-dir", default=None, help="Deployment records directory")
    deploy.add_argument("--artifacts-dir", default=None, help="Compiled artifacts directory")
    deploy.set_defaults(func=cmd_deploy)

    generate = subparsers.add_parser("generate-account", help="Generate a deployer account")
    generate.add_argument("--network", "-n", default="sepolia", help="Network to show a faucet for")
    generate.set_defaults(func=cmd_generate_account)

    copy_abi = subparsers.add_parser("copy-abi", help="Export contract ABIs")
    copy_abi.add_argument(
        "--destination", "-d", action="append", required=True, help="Output directory (repeatable)"
    )
    copy_abi.add_argument("--artifacts-dir", default=None, help="Compiled artifacts directory")
    copy_abi.set_defaults(func=cmd_copy_abi)

    show = subparsers.add_parser("show", help="Show the latest deployment record")
    show.add_argument("--network", "-n", default="localhost", help=network_help)
    show.add_argument("--deployments-dir", default=None, help="Deployment records directory")
    show.set_defaults(func=cmd_show)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
