"""reposync: keep local clones of an account's repositories in sync with their remotes."""

__version__ = "0.1.0"
