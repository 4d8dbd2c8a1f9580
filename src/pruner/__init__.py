"""Interactive git branch pruning tool.

Features:
- Review local branches one at a time, oldest last commit first
- Keep or delete each branch with a single keypress
- Undo the most recent deletion
- master / main and the checked-out branch are never offered for deletion
"""

__version__ = "0.1.0"
