import csv
from pathlib import Path
from typing import List, Tuple, Union

from pgcrud.core.logger import setup_logger

logger = setup_logger(__name__, include_location=True)


def read_delimited(path: Union[str, Path], delimiter: str = ";") -> Tuple[List[str], List[List[str]]]:
    """
    Read a delimited text file whose first non-blank line is the header.

    Returns ``(header, rows)`` ready for insert_transaction. Cells are
    stripped; blank lines are skipped. A row with a different number of
    cells than the header raises ValueError.
    """
    path = Path(path)
    header: List[str] = []
    rows: List[List[str]] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        for line_no, cells in enumerate(csv.reader(f, delimiter=delimiter), start=1):
            if not cells or all(not cell.strip() for cell in cells):
                continue
            cells = [cell.strip() for cell in cells]
            if not header:
                header = cells
                continue
            if len(cells) != len(header):
                raise ValueError(
                    f"{path}:{line_no}: expected {len(header)} fields, got {len(cells)}"
                )
            rows.append(cells)

    if not header:
        raise ValueError(f"{path} has no header line")
    logger.debug(f"Read {len(rows)} rows with columns {header} from {path}")
    return header, rows
