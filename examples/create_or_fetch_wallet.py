"""
Example: fetch the smart wallet owned by a key, creating it if needed.

This example shows how to:
- Sign the ownership proof and authenticate
- Open the real-time channel with the issued token
- Fetch the existing wallet, or request creation and follow its progress

Set PUBLIC_API_KEY and PRIVATE_KEY in the environment or a .env file.
"""

import asyncio
import json
import os

from dotenv import load_dotenv

from smart_wallet_client import RealtimeClient, SmartWalletClient, WalletResolver
from smart_wallet_client.exceptions import SmartWalletError, WalletCreationFailed

load_dotenv()

API_KEY = os.environ.get("PUBLIC_API_KEY", "")
PRIVATE_KEY = os.environ.get("PRIVATE_KEY", "")


def on_created(wallet):
    print("Smart Wallet successfully created")
    print(f"Smart Wallet: {json.dumps(wallet.data)}")


def on_failed(event_data):
    print("Smart Wallet creation failed")


async def main():
    client = SmartWalletClient(api_key=API_KEY, private_key=PRIVATE_KEY)
    print(f"Owner: {client.address}")

    try:
        token = client.authenticate()
        realtime = RealtimeClient(token=token, name=client.token_subject)

        async with realtime:
            resolver = WalletResolver(client, realtime)

            wallet = resolver.fetch()
            if wallet is not None:
                print("Smart Wallet successfully fetched")
                print(f"Smart Wallet: {json.dumps(wallet.data)}")
                return

            creation = await resolver.create(on_created=on_created, on_failed=on_failed)
            print(f"Creation requested, transaction {creation.transaction_id}")
            print("Waiting for events (Ctrl+C to stop)...")
            try:
                await creation.wait()
            except WalletCreationFailed:
                pass
            for event in creation.events:
                print(f"  {event.event_name}")

    except SmartWalletError as e:
        print(f"Error: {e}")
    finally:
        client.close()


if __name__ == "__main__":
    asyncio.run(main())
