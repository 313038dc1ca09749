import json
import os
from contextlib import contextmanager

import gspread
from gspread.exceptions import APIError, SpreadsheetNotFound, WorksheetNotFound
from gspread.urls import DRIVE_FILES_API_V3_URL
from gspread.utils import ValueInputOption, ValueRenderOption, rowcol_to_a1
from google.oauth2.service_account import Credentials

from models.metrics import log_api_call, log_rate_limit_error

SCOPES = ['https://www.googleapis.com/auth/spreadsheets',
          'https://www.googleapis.com/auth/drive']

SPREADSHEET_MIME_TYPE = 'application/vnd.google-apps.spreadsheet'

# Only spreadsheets the account can write to, newest first
EDITABLE_SPREADSHEETS_QUERY = (
    f"mimeType='{SPREADSHEET_MIME_TYPE}' and trashed=false and 'me' in writers"
)
DOCUMENT_FIELDS = 'files(id,name,capabilities/canEdit)'


class SheetsError(Exception):
    """Base class for failures surfaced by the spreadsheet layer"""
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class SheetNotFoundError(SheetsError):
    """Raised when a tab name does not resolve inside a document"""
    def __init__(self, sheet_name, document_id=None):
        self.sheet_name = sheet_name
        self.document_id = document_id
        super().__init__(f"Sheet '{sheet_name}' not found")


class OutOfRangeError(SheetsError):
    """Raised when there are no student rows at the configured start row"""


class TransportError(SheetsError):
    """Raised when a Google API call fails or returns malformed data"""


class RateLimitError(TransportError):
    """Raised when Google Sheets API rate limit is hit"""


def get_google_creds():
    """Get Google credentials either from file or environment variable"""
    if 'GOOGLE_SHEETS_CREDS' in os.environ:
        creds_dict = json.loads(os.environ['GOOGLE_SHEETS_CREDS'])
        return Credentials.from_service_account_info(creds_dict, scopes=SCOPES)
    else:
        return Credentials.from_service_account_file('client_secret.json', scopes=SCOPES)


def get_client():
    """Authorize a gspread client with the service account"""
    return gspread.authorize(get_google_creds())


@contextmanager
def _api_call(operation, target):
    """Log a Google call and translate gspread failures into TransportError"""
    try:
        yield
    except APIError as e:
        if e.response.status_code == 429:
            log_rate_limit_error(target)
            raise RateLimitError(str(e)) from e
        log_api_call(operation, target, outcome=f'failed: {e}')
        raise TransportError(str(e)) from e
    except (KeyError, TypeError, ValueError) as e:
        log_api_call(operation, target, outcome='malformed response')
        raise TransportError(f"Malformed response from Google: {e}") from e
    else:
        log_api_call(operation, target)


def _last_filled(cells):
    """1-based position of the last non-blank cell, 0 if there is none"""
    for index in range(len(cells), 0, -1):
        if str(cells[index - 1]).strip() != '':
            return index
    return 0


class SheetsBackend:
    """
    Narrow capability set over Google Drive and Google Sheets.

    Sheet handles returned by open_sheet() are gspread Worksheet objects and
    are only meaningful to the backend that produced them.
    """

    def __init__(self, client=None):
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = get_client()
        return self._client

    def list_documents(self, page_size):
        """One page of spreadsheet files the account is a writer on"""
        params = {
            'q': EDITABLE_SPREADSHEETS_QUERY,
            'pageSize': page_size,
            'fields': DOCUMENT_FIELDS,
            'orderBy': 'modifiedTime desc',
            'supportsAllDrives': True,
            'includeItemsFromAllDrives': True,
        }
        with _api_call('list', 'Drive'):
            response = self.client.http_client.request('get', DRIVE_FILES_API_V3_URL, params=params)
            files = response.json()['files']
        return files

    def _open_document(self, document_id):
        try:
            with _api_call('open', document_id):
                return self.client.open_by_key(document_id)
        except SpreadsheetNotFound as e:
            raise TransportError(f"Spreadsheet '{document_id}' not found") from e

    def list_sheets(self, document_id):
        spreadsheet = self._open_document(document_id)
        with _api_call('read', document_id):
            return [worksheet.title for worksheet in spreadsheet.worksheets()]

    def open_sheet(self, document_id, sheet_name):
        spreadsheet = self._open_document(document_id)
        try:
            with _api_call('read', f'{document_id}/{sheet_name}'):
                return spreadsheet.worksheet(sheet_name)
        except WorksheetNotFound as e:
            raise SheetNotFoundError(sheet_name, document_id) from e

    def timezone(self, document_id):
        """IANA time zone name configured on the document"""
        spreadsheet = self._open_document(document_id)
        return spreadsheet.timezone

    def _all_values(self, sheet):
        with _api_call('read', sheet.title):
            return sheet.get_all_values()

    def last_row(self, sheet):
        rows = self._all_values(sheet)
        for index in range(len(rows), 0, -1):
            if _last_filled(rows[index - 1]):
                return index
        return 0

    def last_column(self, sheet):
        rows = self._all_values(sheet)
        return max((_last_filled(row) for row in rows), default=0)

    def get_range(self, sheet, row, col, num_rows, num_cols):
        """Display-formatted values, padded to num_rows x num_cols with ''"""
        a1_range = f'{rowcol_to_a1(row, col)}:{rowcol_to_a1(row + num_rows - 1, col + num_cols - 1)}'
        with _api_call('read', f'{sheet.title}!{a1_range}'):
            values = sheet.get(a1_range, value_render_option=ValueRenderOption.formatted)
        grid = []
        for index in range(num_rows):
            cells = list(values[index]) if index < len(values) else []
            cells += [''] * (num_cols - len(cells))
            grid.append([str(cell) for cell in cells[:num_cols]])
        return grid

    def set_cell(self, sheet, row, col, value, user_entered=False, number_pattern=None):
        """
        Overwrite a single cell.
        user_entered lets Google parse the value (dates, numbers);
        number_pattern applies a DATE display format to the cell.
        """
        a1 = rowcol_to_a1(row, col)
        option = ValueInputOption.user_entered if user_entered else ValueInputOption.raw
        with _api_call('write', f'{sheet.title}!{a1}'):
            sheet.update(range_name=a1, values=[[value]], value_input_option=option)
            if number_pattern:
                sheet.format(a1, {'numberFormat': {'type': 'DATE', 'pattern': number_pattern}})

    def insert_column_after(self, sheet, col):
        """Insert one blank column after col (col 0 inserts at the front)"""
        with _api_call('write', f'{sheet.title} insert column {col + 1}'):
            sheet.insert_cols([['']], col=col + 1)


_backend = None


def get_backend():
    """Get or create the backend singleton"""
    global _backend
    if _backend is None:
        _backend = SheetsBackend()
    return _backend


def set_backend(backend):
    """Swap the process-wide backend (tests, alternate storage)"""
    global _backend
    _backend = backend
    return _backend
