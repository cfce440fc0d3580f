"""Command validation utilities for smart-suspend"""

# Valid commands at CLI level
CLI_COMMANDS = [
    "/run",
    "/check",
    "/status",
    "/help",
]


def is_valid_cli_command(command: str) -> bool:
    """Check if a CLI command is valid

    Args:
        command: Command string (without leading /)

    Returns:
        True if valid, False otherwise
    """
    return f"/{command}" in CLI_COMMANDS


def get_command_suggestion(user_input: str) -> str:
    """Get a helpful error message for invalid commands

    Args:
        user_input: User's invalid input

    Returns:
        Error message string
    """
    return f"Unknown command '{user_input}'\n\nRun 'smart-suspend /help' to see available commands"
