"""CSV input loading."""

import csv
from io import StringIO
from pathlib import Path


class CsvParseError(ValueError):
    """The CSV file could not be parsed into rows; carries every problem found."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(f"CSV parsing errors: {', '.join(errors)}")


def parse_csv_rows(csv_content: str) -> list[dict[str, str]]:
    """
    Parse CSV text with a header row into string-keyed rows.
    Blank lines are skipped; rows whose field count differs from the header are errors.
    """
    reader = csv.DictReader(StringIO(csv_content, newline=""), strict=True)
    rows: list[dict[str, str]] = []
    errors: list[str] = []
    try:
        if not reader.fieldnames:
            raise CsvParseError(["missing header row"])
        for row in reader:
            line = reader.line_num
            if None in row:
                errors.append(f"Too many fields on line {line}")
                continue
            if any(v is None for v in row.values()):
                errors.append(f"Too few fields on line {line}")
                continue
            rows.append(row)
    except csv.Error as e:
        errors.append(f"line {reader.line_num}: {e}")

    if errors:
        raise CsvParseError(errors)
    return rows


def read_csv_rows(path: str | Path) -> list[dict[str, str]]:
    """Read a UTF-8 CSV file (BOM tolerated). OSError propagates for unreadable files."""
    try:
        content = Path(path).read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as e:
        raise CsvParseError([f"{path} is not valid UTF-8: {e.reason}"]) from e
    return parse_csv_rows(content)
