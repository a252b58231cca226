"""Trellord Connector - relay Trello board activity to Discord."""

__version__ = "0.1.0"
