"""History rewriting for gittag.

This package provides:
- filter_branch: rewrite_history, write_message_map, cleanup_backup_refs, list_backup_refs
- msg_filter: the per-commit filter filter-branch executes
"""

from gittag.rewrite.filter_branch import (
    BACKUP_REF_NAMESPACE,
    build_msg_filter_command,
    cleanup_backup_refs,
    list_backup_refs,
    rewrite_history,
    write_message_map,
)

__all__ = [
    "BACKUP_REF_NAMESPACE",
    "build_msg_filter_command",
    "cleanup_backup_refs",
    "list_backup_refs",
    "rewrite_history",
    "write_message_map",
]
