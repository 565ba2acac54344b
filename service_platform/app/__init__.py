"""Platform service application package."""
