"""taskledger - personal task and tag tracker."""

__version__ = "0.1.0"
