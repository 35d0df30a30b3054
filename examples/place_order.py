"""SportX Place and Cancel Order Example.

This example connects to the SportX relayer, places a small maker order on
the first active market, and cancels it again.

Prerequisites:
1. pip install sportx-sdk
2. Set environment variables (SPORTX_PRIVATE_KEY,
   SPORTX_MAINCHAIN_PROVIDER_URL, SPORTX_SIDECHAIN_PROVIDER_URL,
   SPORTX_FILL_HASHER_ADDRESS, SPORTX_TRANSFER_PROXY_ADDRESS)
3. Approve the SportX contracts for DAI (run once with APPROVE_DAI=1)

Usage:
    python place_order.py
"""

import asyncio
import os
import time

from dotenv import load_dotenv

load_dotenv()


async def main():
    from sportx_sdk import (
        SportX,
        Environments,
        SportXError,
        Tokens,
        config_from_env,
        setup_logging,
    )
    from sportx_sdk.constants import MAINCHAIN_NETWORKS, TOKEN_ADDRESSES

    required = [
        "SPORTX_PRIVATE_KEY",
        "SPORTX_MAINCHAIN_PROVIDER_URL",
        "SPORTX_SIDECHAIN_PROVIDER_URL",
        "SPORTX_FILL_HASHER_ADDRESS",
        "SPORTX_TRANSFER_PROXY_ADDRESS",
    ]
    missing = [var for var in required if not os.environ.get(var)]
    if missing:
        print(f"Missing required environment variables: {', '.join(missing)}")
        return

    setup_logging(os.environ.get("LOG_LEVEL", "WARNING"))

    print("=" * 60)
    print("  SPORTX PLACE AND CANCEL ORDER")
    print("=" * 60)

    config = config_from_env()
    sportx = SportX(config)

    try:
        print("\n[1] Connecting to relayer...")
        await sportx.init()
        metadata = sportx.metadata
        print(f"    Executor: {metadata.get('executorAddress')}")

        if os.environ.get("APPROVE_DAI"):
            print("\n[2] Approving SportX contracts for DAI...")
            result = await sportx.approve_sportx_contracts_dai()
            print(f"    Status: {result.get('status')}")

        print("\n[3] Fetching active markets...")
        markets = await sportx.get_active_markets()
        if not markets:
            print("    No active markets")
            return
        market = markets[0]
        print(f"    {market.get('teamOneName')} vs {market.get('teamTwoName')}")

        network = MAINCHAIN_NETWORKS[Environments(config["env"])]
        dai = TOKEN_ADDRESSES[network][Tokens.DAI]

        print("\n[4] Placing order (10 DAI at 50%)...")
        result = await sportx.new_order({
            "marketHash": market["marketHash"],
            "totalBetSize": str(10 * 10**18),
            "percentageOdds": str(50 * 10**18),
            "expiry": int(time.time()) + 3600,
            "isMakerBettingOutcomeOne": True,
            "baseToken": dai,
        })
        order_hashes = result.get("data", {}).get("orders", [])
        print(f"    Order hashes: {order_hashes}")

        if order_hashes:
            print("\n[5] Cancelling order...")
            result = await sportx.cancel_order(order_hashes, "Example cleanup")
            print(f"    Status: {result.get('status')}")

        print("\n" + "=" * 60)

    except SportXError as e:
        print(f"\nError: {e}")
        raise

    finally:
        await sportx.close()


if __name__ == "__main__":
    asyncio.run(main())
