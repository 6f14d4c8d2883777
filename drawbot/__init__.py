"""Daily drawing contest bot for Discord."""
