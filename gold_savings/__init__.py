"""Gold savings scheme: member ledger, sessions and price feed."""
