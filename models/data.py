"""
Attendance operations over a spreadsheet backend.
Routes should use this module for all data operations.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models import fields
from models.metrics import log_operation, log_operation_error
from models.sheets import OutOfRangeError, get_backend
from models.utils import parse_session_date, require_index, session_header_value


@dataclass
class Document:
    """A spreadsheet the current account can edit"""
    id: str
    name: str

    def to_dict(self) -> Dict[str, str]:
        return {'id': self.id, 'name': self.name}


@dataclass
class RosterEntry:
    """One student row with its mark for the selected session column"""
    name: str
    row_index: int
    status: str

    def to_dict(self) -> Dict[str, Any]:
        return {'name': self.name, fields.ROW_INDEX: self.row_index, fields.STATUS: self.status}


# =============================================================================
# Read Operations
# =============================================================================

def list_editable_spreadsheets(backend=None) -> List[Document]:
    """
    List spreadsheets the account may edit.

    Only the first page from Drive is used; anything past
    DOCUMENT_PAGE_SIZE is silently left out. Files whose edit capability
    is missing or false are dropped even if Drive returned them.
    """
    backend = backend or get_backend()
    files = backend.list_documents(fields.DOCUMENT_PAGE_SIZE)
    documents = [
        Document(id=f['id'], name=f.get('name', ''))
        for f in files
        if (f.get('capabilities') or {}).get('canEdit') is True
    ]
    log_operation('list_editable_spreadsheets', returned=len(documents), listed=len(files))
    return documents


def list_sheet_names(document_id: str, backend=None) -> List[str]:
    """Get tab names of a document in display order."""
    backend = backend or get_backend()
    return backend.list_sheets(document_id)


def read_roster(document_id: str, sheet_name: str, name_col_index, start_row_index,
                attendance_col_index, backend=None) -> List[RosterEntry]:
    """
    Read student names with their current mark in the attendance column.

    Blank-name rows are skipped without shifting the row index of later
    students. Raises OutOfRangeError if the sheet ends before start_row_index.
    """
    name_col = require_index(name_col_index, 'nameColIndex')
    start_row = require_index(start_row_index, 'startRowIndex')
    attendance_col = require_index(attendance_col_index, 'attendanceColIndex')

    backend = backend or get_backend()
    sheet = backend.open_sheet(document_id, sheet_name)
    last_row = backend.last_row(sheet)
    if last_row < start_row:
        raise OutOfRangeError(
            f"No student rows in '{sheet_name}': last row is {last_row}, roster starts at row {start_row}"
        )

    num_rows = last_row - start_row + 1
    names = backend.get_range(sheet, start_row, name_col, num_rows, 1)
    marks = backend.get_range(sheet, start_row, attendance_col, num_rows, 1)

    roster = []
    for offset, (name_cells, mark_cells) in enumerate(zip(names, marks)):
        name = str(name_cells[0]).strip() if name_cells else ''
        if not name:
            continue
        status = str(mark_cells[0]).upper() if mark_cells else ''
        roster.append(RosterEntry(name=name, row_index=start_row + offset, status=status))

    log_operation('read_roster', sheet=sheet_name, rows=num_rows, students=len(roster))
    return roster


# =============================================================================
# Write Operations
# =============================================================================

def create_session_column(document_id: str, sheet_name: str, date_string: str, backend=None) -> int:
    """
    Append a dated session column after the last used column.

    A new column is added on every call, even when a column for the same
    date already exists.
    """
    backend = backend or get_backend()
    sheet = backend.open_sheet(document_id, sheet_name)
    session_date = parse_session_date(date_string, backend.timezone(document_id))

    last_col = backend.last_column(sheet)
    new_col = last_col + 1

    backend.insert_column_after(sheet, last_col)
    backend.set_cell(sheet, fields.HEADER_ROW, new_col, session_header_value(session_date),
                     user_entered=True, number_pattern=fields.SESSION_DATE_PATTERN)

    log_operation('create_session_column', sheet=sheet_name, date=date_string, column=new_col)
    return new_col


def write_attendance(document_id: str, sheet_name: str, row_index, col_index, status,
                     backend=None) -> Dict[str, Any]:
    """
    Write one attendance mark verbatim.

    Never raises: failures come back as {'success': False, 'message': ...}
    so one bad cell does not abort the rest of a batch.
    """
    try:
        row = require_index(row_index, 'rowIndex')
        col = require_index(col_index, 'colIndex')
        backend = backend or get_backend()
        sheet = backend.open_sheet(document_id, sheet_name)
        backend.set_cell(sheet, row, col, status)
    except Exception as e:
        log_operation_error('write_attendance', e)
        return _write_result(False, str(e))

    log_operation('write_attendance', sheet=sheet_name, row=row, col=col, status=status)
    return _write_result(True)


def _write_result(success: bool, message: Optional[str] = None) -> Dict[str, Any]:
    result: Dict[str, Any] = {'success': success}
    if message is not None:
        result['message'] = message
    return result
