from .base import RevisionSource
from .nexus import NexusModsClient, REVISION_QUERY


def get_source(config, **kwargs) -> RevisionSource:
    """Build the revision source for ``config``. One per command."""
    return NexusModsClient(config, **kwargs)


__all__ = ["RevisionSource", "NexusModsClient", "REVISION_QUERY", "get_source"]
