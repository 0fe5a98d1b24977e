"""
SoftDeleteable Examples

Available Examples:
------------------

soft_delete_example.py
    Comments, tags and log entries deleted through one session, showing
    timestamp and flag markers, notifications, the query filter and
    physical deletes of already soft-deleted rows.

Running Examples:
----------------

    python examples/soft_delete_example.py
"""
