#!/usr/bin/env python3
"""
Simple example of using the JaguarPlace SDK.
"""
import logging
import os

from jaguarplace_sdk import ExecutionReverted, JaguarPlaceClient, JaguarPlaceError


def main():
    """
    Demonstrate basic usage of the JaguarPlaceClient.

    This example shows how to:
    1. Build a client from JAGUARPLACE_* environment variables
    2. Mark an item as sold and wait for confirmation
    3. Tell a contract revert apart from any other failure
    """
    logging.basicConfig(level=logging.INFO)

    if not os.environ.get("JAGUARPLACE_PRIVATE_KEY"):
        print("ERROR: JAGUARPLACE_PRIVATE_KEY environment variable is required")
        return

    client = JaguarPlaceClient.from_env()
    print(f"Sender: {client.address}")

    try:
        result = client.mark_item_as_sold(1)
        print(f"Item marked as sold in block {result.receipt.block_number}")
        print(f"Transaction hash: {result.tx_hash}")
    except ExecutionReverted as e:
        print(f"Contract rejected the call: {e.reason}")
    except JaguarPlaceError as e:
        print(f"Call failed: {e}")


if __name__ == "__main__":
    main()
