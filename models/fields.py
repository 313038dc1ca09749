"""
Field names and defaults shared across the app.
Single source of truth for JSON keys and sheet layout settings.
"""
import os

# Attendance status codes
PRESENT = 'P'
ABSENT = 'A'
LATE = 'L'
STATUS_CODES = (PRESENT, ABSENT, LATE)

# Sheet layout
HEADER_ROW = int(os.environ.get('HEADER_ROW', 1))
SESSION_DATE_PATTERN = os.environ.get('SESSION_DATE_PATTERN', 'ddd, mmm d')
SESSION_DATE_FORMAT = '%Y-%m-%d'

# Drive listing cap (no pagination past the first page)
DOCUMENT_PAGE_SIZE = int(os.environ.get('DOCUMENT_PAGE_SIZE', 100))

# JSON keys exchanged with the page
DOCUMENT_ID = 'documentId'
SHEET_NAME = 'sheetName'
DATE = 'date'
NAME_COL_INDEX = 'nameColIndex'
START_ROW_INDEX = 'startRowIndex'
ATTENDANCE_COL_INDEX = 'attendanceColIndex'
ROW_INDEX = 'rowIndex'
COL_INDEX = 'colIndex'
COLUMN_INDEX = 'columnIndex'
STATUS = 'status'
