import csv
import io
from typing import Dict, List, Optional

from learnlab.core.exceptions import ValidationError

REQUIRED_COLUMNS = ("name", "email")


def parse_roster_csv(text: str) -> List[Dict[str, Optional[str]]]:
    """
    Parse roster CSV text into ``{name, email, password}`` rows.

    The header row is matched case-insensitively; ``password`` is optional.
    Blank lines are skipped. Empty cells become None so the import reports
    them per row instead of rejecting the whole file.
    """
    reader = csv.reader(io.StringIO(text.strip()))
    try:
        header = next(reader)
    except StopIteration:
        raise ValidationError("CSV must have header row and at least one data row")

    columns = [column.strip().lower() for column in header]
    missing = [column for column in REQUIRED_COLUMNS if column not in columns]
    if missing:
        raise ValidationError(f"CSV must have columns: {', '.join(REQUIRED_COLUMNS)}")

    name_idx = columns.index("name")
    email_idx = columns.index("email")
    password_idx = columns.index("password") if "password" in columns else None

    def cell(values: List[str], idx: Optional[int]) -> Optional[str]:
        if idx is None or idx >= len(values):
            return None
        return values[idx].strip() or None

    rows = []
    for values in reader:
        if not any(value.strip() for value in values):
            continue
        rows.append(
            {
                "name": cell(values, name_idx),
                "email": cell(values, email_idx),
                "password": cell(values, password_idx),
            }
        )

    if not rows:
        raise ValidationError("CSV must have header row and at least one data row")
    return rows
