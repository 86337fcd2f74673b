#!/usr/bin/env python3
"""
Provision the Azure Storage resources used by ABC Retailers.

Creates the Customers/Products/Orders tables, the product-images and
payment-proofs containers, the order-notifications and stock-updates queues
and the contracts share with its payments directory. Existing resources are
left untouched, so the script can be re-run safely.
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Bootstrap: Add src directory to Python path for src-layout convenience
_script_dir = Path(__file__).resolve().parent
_src_dir_str = str(_script_dir.parent / "src")
if _src_dir_str not in sys.path:
    sys.path.insert(0, _src_dir_str)

from abcretailers.adapters.storage import AzureStorageGateway
from abcretailers.core.config import get_settings
from abcretailers.core.exceptions import ABCRetailersException
from abcretailers.core.structured_logger import configure_logging
from abcretailers.core.utils import mask_connection_string


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument(
        "--connection-string",
        help="Azure Storage connection string (defaults to AZURE_STORAGE_CONNECTION_STRING)",
    )
    parser.add_argument(
        "--check-only",
        action="store_true",
        help="Only report which tables are missing; create nothing",
    )
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    settings = get_settings()
    configure_logging(settings.logging)

    storage_settings = settings.azure_storage
    if args.connection_string:
        storage_settings = storage_settings.model_copy(update={"connection_string": args.connection_string})

    print("=" * 70)
    print("ABC Retailers Storage Setup")
    print("=" * 70)
    print(f"🔗 Connection String (masked): {mask_connection_string(storage_settings.connection_string)}")
    print()

    try:
        gateway = AzureStorageGateway.from_settings(storage_settings)
        if not args.check_only:
            await gateway.initialize()
            print("✅ Storage resources provisioned")
        readiness = await gateway.check_readiness()
    except ABCRetailersException as e:
        print(f"❌ {type(e).__name__}: {e.message}")
        return 1

    if readiness["ready"]:
        print("✅ All tables present")
        return 0
    print(f"❌ Missing tables: {', '.join(readiness['missing_tables'])}")
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
