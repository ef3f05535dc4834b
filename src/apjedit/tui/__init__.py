"""Terminal UI for apjedit (requires prompt_toolkit)."""
