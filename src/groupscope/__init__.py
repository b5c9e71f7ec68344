"""GroupScope - hierarchical group-based access control for a CRM.

Users belong to groups arranged in a forest; a user's visibility covers
their group and every group below it.
"""

__version__ = "0.1.0"

from groupscope.infrastructure.api.app import app

__all__ = ["app", "__version__"]
