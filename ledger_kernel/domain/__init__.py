"""Pure domain layer of the ledger kernel: value objects and tree/index logic."""
