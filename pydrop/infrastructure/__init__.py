"""
Infrastructure layer: transport, credentials, API client, services,
configuration and logging.
"""
