#!/usr/bin/env python3
"""
Print Azure Queue statistics for the order-notifications and stock-updates queues.
"""

import asyncio
import sys
from pathlib import Path

# Bootstrap: Add src directory to Python path for src-layout convenience
# This allows the script to be run directly without PYTHONPATH=./src
_script_dir = Path(__file__).resolve().parent
_src_dir_str = str(_script_dir.parent / "src")
if _src_dir_str not in sys.path:
    sys.path.insert(0, _src_dir_str)

from abcretailers.adapters.storage import AzureStorageGateway
from abcretailers.core.config import get_settings
from abcretailers.core.exceptions import ABCRetailersException
from abcretailers.core.utils import mask_connection_string


async def main():
    """Print queue statistics."""
    print("=" * 70)
    print("Azure Queue Statistics")
    print("=" * 70)
    print()

    settings = get_settings()
    storage_settings = settings.azure_storage

    print("🔗 Connection String (masked):")
    print(f"  {mask_connection_string(storage_settings.connection_string)}")
    print(f"  Operation timeout: {storage_settings.operation_timeout}s")
    print()

    print("📊 Queue Statistics:")
    try:
        gateway = AzureStorageGateway.from_settings(storage_settings)
        lengths = await gateway.queue_lengths()
    except ABCRetailersException as e:
        print(f"  ❌ Connection failed: {e.message}")
        print(f"     Error type: {type(e).__name__}")
        sys.exit(1)

    for queue_name, count in lengths.items():
        if count is None:
            print(f"  ⚠️  {queue_name}: unavailable")
        else:
            print(f"  ✅ {queue_name}: ~{count} message(s)")
    print()
    print("=" * 70)


if __name__ == "__main__":
    asyncio.run(main())
