"""Discord cogs loaded by ``python -m drawbot``."""
