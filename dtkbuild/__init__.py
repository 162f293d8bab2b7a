"""dtkbuild - page module-dependency analysis and build-request caching core."""

__version__ = "0.1.0"
