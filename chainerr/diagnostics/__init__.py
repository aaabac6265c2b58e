"""Environment diagnostics for ChainErr."""
