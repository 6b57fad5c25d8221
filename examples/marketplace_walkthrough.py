#!/usr/bin/env python3
"""
Walk through every JaguarPlace function once, in order.

Required environment:
    JAGUARPLACE_RPC_URL, JAGUARPLACE_PRIVATE_KEY, JAGUARPLACE_CONTRACT_ADDRESS,
    NEW_OWNER_ADDRESS, USER_ADDRESS
"""
import logging
import os
import sys

from jaguarplace_sdk import CallDriver, JaguarPlaceError, example_sequence, run_sequence


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    new_owner = os.environ.get("NEW_OWNER_ADDRESS")
    user = os.environ.get("USER_ADDRESS")
    if not new_owner or not user:
        print("ERROR: NEW_OWNER_ADDRESS and USER_ADDRESS environment variables are required")
        return 1

    try:
        driver = CallDriver.from_env()
        driver.assert_chain_id()
    except JaguarPlaceError as e:
        print(f"ERROR: {e}")
        return 1

    with driver:
        outcomes = run_sequence(driver, example_sequence(new_owner, user))

    for outcome in outcomes:
        if outcome.ok:
            print(f"ok    {outcome.step.operation}  {outcome.result.tx_hash}")
        else:
            print(f"FAIL  {outcome.step.operation}  {outcome.reason}")

    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
