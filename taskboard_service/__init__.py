"""Taskboard service: users, projects and tasks over REST and GraphQL."""

__version__ = "0.1.0"
