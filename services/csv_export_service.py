"""
CSV Export Writer

Serialises task records and the statistics breakdown to delimited text.
Every field is quoted and internal quotes are doubled, so free-text titles
and descriptions containing the delimiter, quotes or newlines stay intact.
"""

import csv
import io
from datetime import date, datetime
from typing import Iterable, List, Sequence

from models import TaskStatus
from services.task_sql_dao import TaskRecord, UNCATEGORIZED

TASK_HEADER = ["ID", "Title", "Description", "Status", "Category", "Due date", "Created at", "Updated at"]
STATISTICS_HEADER = ["Metric", "Value"]
CSV_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(CSV_TIMESTAMP_FORMAT)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


class CsvExportWriter:
    """Writes fully quoted CSV with a configurable delimiter."""

    def __init__(self, delimiter: str = ";"):
        if not delimiter or len(delimiter) != 1:
            raise ValueError("CSV delimiter must be a single character")
        self.delimiter = delimiter

    def _write_rows(self, rows: Iterable[Sequence]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(
            buffer,
            delimiter=self.delimiter,
            quotechar='"',
            doublequote=True,
            quoting=csv.QUOTE_ALL,
            lineterminator="\r\n",
        )
        for row in rows:
            writer.writerow([_cell(value) for value in row])
        return buffer.getvalue()

    def task_rows(self, records: Iterable[TaskRecord]) -> List[list]:
        rows = [TASK_HEADER]
        for record in records:
            rows.append([
                record.id,
                record.title,
                record.description,
                record.status,
                record.category_name,
                record.due_date,
                record.created_at,
                record.updated_at,
            ])
        return rows

    def statistics_rows(self, stats) -> List[list]:
        """
        Fixed order: total, one row per status, then one row per category
        sorted by name with the uncategorized bucket last.
        """
        rows = [STATISTICS_HEADER, ["Total tasks", stats.total]]
        for status in TaskStatus:
            rows.append([status.value, stats.by_status.get(status.value, 0)])

        names = sorted(name for name in stats.by_category if name != UNCATEGORIZED)
        if UNCATEGORIZED in stats.by_category:
            names.append(UNCATEGORIZED)
        for name in names:
            rows.append([f"Category: {name}", stats.by_category[name]])
        return rows

    def write_tasks(self, records: Iterable[TaskRecord]) -> str:
        return self._write_rows(self.task_rows(records))

    def write_statistics(self, stats) -> str:
        return self._write_rows(self.statistics_rows(stats))
