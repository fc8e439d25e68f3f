"""Pure rules engine: cadence, ledger aggregation, rewards, badges and challenges."""
