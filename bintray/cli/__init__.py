from .click import cli  # noqa: F401
