# webdriver_runtime/decorators/__init__.py
#
# Re-exports decorators from their respective modules.

from .soft_assert import soft_assertable

__all__ = [
    "soft_assertable",
]
