"""
Change tracking between the snapshot taken when editing started and the live
value tree. Uses DeepDiff's tree view so every change carries an explicit
path, which is reported in the same identity format the editor uses for its
widgets (``root_Networks_0_Tag``).
"""

from typing import Dict, Any, List
import logging

from deepdiff import DeepDiff
from deepdiff.helper import notpresent

from .namespace import path_identity

logger = logging.getLogger(__name__)

CHANGE_LABELS = {
    'values_changed': 'changed',
    'type_changes': 'changed',
    'dictionary_item_added': 'added',
    'dictionary_item_removed': 'removed',
    'iterable_item_added': 'added',
    'iterable_item_removed': 'removed',
}


def _present(value: Any) -> Any:
    return None if value is notpresent else value


def calculate_changes(original: Any, current: Any) -> List[Dict[str, Any]]:
    """
    List the differences between two value trees.

    Array order is significant; reordered elements are reported as changes.

    Args:
        original: Snapshot of the value tree
        current: Live value tree

    Returns:
        Rows of ``{'path', 'change', 'old', 'new'}`` sorted by path
    """
    diff = DeepDiff(original, current, ignore_order=False, ignore_nan_inequality=True,
                    verbose_level=2, view='tree')

    rows = []
    for report_type, levels in diff.items():
        change = CHANGE_LABELS.get(report_type)
        if change is None:
            logger.debug(f"Ignoring DeepDiff report type {report_type}")
            continue
        for level in levels:
            rows.append({
                'path': path_identity(level.path(output_format='list')),
                'change': change,
                'old': _present(level.t1),
                'new': _present(level.t2),
            })

    rows.sort(key=lambda row: (row['path'], row['change']))
    logger.debug(f"Calculated {len(rows)} changes")
    return rows


def has_changes(original: Any, current: Any) -> bool:
    """Return True when the live tree differs from the snapshot."""
    return bool(calculate_changes(original, current))


def get_change_summary(changes: List[Dict[str, Any]]) -> Dict[str, int]:
    """Count change rows by kind."""
    summary = {'changed': 0, 'added': 0, 'removed': 0, 'total': len(changes)}
    for row in changes:
        summary[row['change']] += 1
    return summary
