"""
Command Handlers.

One module per CLI sub-command.
"""
