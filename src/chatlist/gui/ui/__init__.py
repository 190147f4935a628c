"""Qt adapters for the chat list core."""
