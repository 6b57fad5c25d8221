from .driver_creator import (
    create_test_config,
    create_test_driver,
    FakeContractFunctions,
    OPERATION_CALLS,
    TEST_RPC_URL,
    TEST_PRIV_KEY,
    TEST_CONTRACT,
    TEST_USER,
    TEST_NEW_OWNER,
)
