"""Framework independent list reconciliation and animation scheduling."""
