"""Pure domain types for the deal board: stages, deals, sessions."""
