"""Building blocks for Language Server Protocol servers: transport, dispatch, protocol types, URIs and drafts."""

__version__ = "0.1.0"