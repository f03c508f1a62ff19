"""ec-ova-deploy package."""

__all__ = [
    "cli",
    "config",
    "constants",
    "desktop",
    "dispatch",
    "esx",
    "exceptions",
    "models",
    "payload",
    "host",
    "preflight",
    "utils",
]
