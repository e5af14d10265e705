"""Built-in CLI commands -- ``extract`` and the ``config`` group."""
