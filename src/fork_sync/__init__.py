"""Fork Sync - keep an organization's forks in step with their upstreams."""

__version__ = "0.1.0"
