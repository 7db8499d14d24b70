"""
Compressed leaf verification CLI entry point.

Check a compressed asset's indexed state against its on-chain tree, list the
assets of an owner, or decode a tree account.

Usage::

    python -m leaf_proof verify <ASSET_ID>
    python -m leaf_proof verify <ASSET_ID> --transfer-to <NEW_OWNER>
    python -m leaf_proof verify <ASSET_ID> --verify-creator <CREATOR>
    python -m leaf_proof assets <OWNER> --all
    python -m leaf_proof tree <TREE_ADDRESS>

Options:
    --rpc-url      Read API endpoint (default: LEAF_PROOF_RPC_URL, then RPC_URL, then devnet)
    -v, --verbose  Enable debug logging
    --no-color     Disable colored logging output

Exit codes:
    0  verified
    1  the asset, proof or account could not be verified
    2  the proof root has already left the tree's changelog
    3  the indexer stayed unreachable
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from leaf_proof.config import RPC_URL
from leaf_proof.subspecs.concurrent_tree import ConcurrentMerkleTreeAccount
from leaf_proof.subspecs.read_api import AssetSortBy, AssetSortDirection, ReadApiClient
from leaf_proof.subspecs.verification import AssetVerifier
from leaf_proof.types import LeafProofError, Pubkey, StaleRootError, TransientRpcError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_STALE = 2
EXIT_UNREACHABLE = 3


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging on stderr, keeping stdout for command output."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    # Request lines from httpx would drown the verification log.
    if not verbose:
        logging.getLogger("httpx").setLevel(logging.WARNING)


async def verify_command(
    client: ReadApiClient,
    asset_id: str,
    tree: str | None = None,
    transfer_to: str | None = None,
    verify_creator: str | None = None,
) -> dict[str, Any]:
    """
    Verify one asset and report it, plus any requested instruction payload.

    Raises:
        LeafProofError: If any step of the verification fails.
        ValueError: If a verify-creator payload is requested for an ineligible creator.
    """
    verified = await AssetVerifier(client).verify_asset(asset_id, tree_address=tree)

    report: dict[str, Any] = {
        "asset_id": str(verified.leaf.id),
        "tree": str(verified.tree),
        "owner": str(verified.leaf.owner),
        "delegate": str(verified.leaf.leaf_delegate),
        "leaf_index": verified.leaf.index,
        "leaf_hash": str(verified.leaf_hash),
        "root": str(verified.root),
        "sequence_number": int(verified.result.sequence_number),
        "is_current_root": verified.result.is_current,
        "canopy_depth": verified.canopy_depth,
        "full_proof": [str(node) for node in verified.full_proof],
        "truncated_proof": [str(node) for node in verified.truncated_proof],
    }
    if transfer_to is not None:
        transfer = verified.transfer_request(Pubkey(transfer_to))
        report["transfer"] = transfer.model_dump(mode="json")
    if verify_creator is not None:
        creator_request = verified.verify_creator_request(Pubkey(verify_creator))
        report["verify_creator"] = creator_request.model_dump(mode="json")
    return report


async def assets_command(
    client: ReadApiClient,
    owner: str,
    *,
    sort_by: AssetSortBy = AssetSortBy.CREATED,
    sort_direction: AssetSortDirection = AssetSortDirection.ASC,
    limit: int = 1000,
    page: int = 1,
    all_pages: bool = False,
) -> list[dict[str, Any]]:
    """List an owner's assets, one page or every page."""
    if all_pages:
        assets = [
            asset
            async for asset in client.iter_assets_by_owner(
                owner, sort_by=sort_by, sort_direction=sort_direction, limit=limit
            )
        ]
    else:
        listing = await client.get_assets_by_owner(
            owner, sort_by=sort_by, sort_direction=sort_direction, limit=limit, page=page
        )
        assets = list(listing.items)

    logger.info("Found %d assets for %s", len(assets), owner)
    return [
        {
            "id": str(asset.id),
            "name": asset.content.metadata.name,
            "uri": asset.content.json_uri,
            "compressed": asset.compression.compressed,
            "tree": str(asset.compression.tree) if asset.compression.tree else None,
            "leaf_id": int(asset.compression.leaf_id),
        }
        for asset in assets
    ]


async def tree_command(client: ReadApiClient, address: str) -> dict[str, Any]:
    """Decode a tree account and summarize it."""
    tree = ConcurrentMerkleTreeAccount.decode_bytes(await client.get_account_info(address))
    return {
        "address": address,
        "max_depth": tree.get_max_depth(),
        "max_buffer_size": tree.get_max_buffer_size(),
        "canopy_depth": tree.get_canopy_depth(),
        "authority": str(tree.get_authority()),
        "creation_slot": tree.get_creation_slot(),
        "sequence_number": tree.get_current_seq(),
        "current_root": str(tree.current_root()),
        "retained_roots": len(tree.changelog),
        "rightmost_index": int(tree.rightmost_path.index),
    }


async def run(args: argparse.Namespace, client: ReadApiClient) -> int:
    """Execute the parsed command and print its JSON output. Returns the exit code."""
    try:
        if args.command == "verify":
            output: Any = await verify_command(
                client, args.asset_id, args.tree, args.transfer_to, args.verify_creator
            )
        elif args.command == "assets":
            output = await assets_command(
                client,
                args.owner,
                sort_by=args.sort_by,
                sort_direction=args.sort_direction,
                limit=args.limit,
                page=args.page,
                all_pages=args.all,
            )
        else:
            output = await tree_command(client, args.address)
    except StaleRootError as e:
        # Not a failure of the asset: a fresh proof will likely verify.
        logger.warning("Stale proof, fetch a fresh one and retry: %s", e)
        return EXIT_STALE
    except TransientRpcError as e:
        logger.error("Indexer unreachable: %s", e)
        return EXIT_UNREACHABLE
    except (LeafProofError, ValueError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        return EXIT_FAILED

    print(json.dumps(output, indent=2))
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="leaf_proof",
        description="Verify compressed NFT leaves against their on-chain trees",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--rpc-url",
        default=RPC_URL,
        help="Read API endpoint (default: LEAF_PROOF_RPC_URL, then RPC_URL, then devnet)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    verify = commands.add_parser("verify", help="Verify an asset against its tree")
    verify.add_argument("asset_id", help="Asset id")
    verify.add_argument(
        "--tree",
        default=None,
        help="Tree address, if known; lets the proof and tree be fetched together",
    )
    verify.add_argument("--transfer-to", default=None, help="Build a transfer to this owner")
    verify.add_argument(
        "--verify-creator", default=None, help="Build a verify-creator payload for this creator"
    )

    assets = commands.add_parser("assets", help="List assets held by an owner")
    assets.add_argument("owner", help="Owner address")
    assets.add_argument(
        "--sort-by",
        type=AssetSortBy,
        choices=list(AssetSortBy),
        default=AssetSortBy.CREATED,
    )
    assets.add_argument(
        "--sort-direction",
        type=AssetSortDirection,
        choices=list(AssetSortDirection),
        default=AssetSortDirection.ASC,
    )
    assets.add_argument("--limit", type=int, default=1000, help="Page size (default: 1000)")
    assets.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    assets.add_argument("--all", action="store_true", help="Walk every page")

    tree = commands.add_parser("tree", help="Decode a concurrent Merkle tree account")
    tree.add_argument("address", help="Tree account address")

    return parser


async def _main(args: argparse.Namespace) -> int:
    async with ReadApiClient(args.rpc_url) as client:
        return await run(args, client)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.no_color)
    logger.debug("Using Read API at %s", args.rpc_url)

    try:
        return asyncio.run(_main(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
