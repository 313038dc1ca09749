from flask import jsonify, request

from models import fields
from models.data import (
    create_session_column,
    list_editable_spreadsheets,
    list_sheet_names,
    read_roster,
    write_attendance,
)
from models.metrics import log_operation_error
from models.sheets import OutOfRangeError, RateLimitError, SheetNotFoundError, TransportError

# Status code for each error kind the page may need to show
ERROR_STATUS = (
    (SheetNotFoundError, 404),
    (OutOfRangeError, 400),
    (ValueError, 400),
    (RateLimitError, 429),
    (TransportError, 502),
)


def _error_response(operation, error):
    log_operation_error(operation, error)
    status = next((code for kind, code in ERROR_STATUS if isinstance(error, kind)), 500)
    return jsonify({'success': False, 'error': str(error)}), status


def _payload():
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def register_api_routes(app):
    """Register the JSON calls the page script makes"""

    @app.route('/api/spreadsheets')
    def api_spreadsheets():
        try:
            documents = list_editable_spreadsheets()
            return jsonify([document.to_dict() for document in documents])
        except Exception as e:
            return _error_response('list_editable_spreadsheets', e)

    @app.route('/api/spreadsheets/<document_id>/sheets')
    def api_sheet_names(document_id):
        try:
            return jsonify(list_sheet_names(document_id))
        except Exception as e:
            return _error_response('list_sheet_names', e)

    @app.route('/api/session-column', methods=['POST'])
    def api_session_column():
        data = _payload()
        try:
            column_index = create_session_column(
                data.get(fields.DOCUMENT_ID),
                data.get(fields.SHEET_NAME),
                data.get(fields.DATE),
            )
            return jsonify({fields.COLUMN_INDEX: column_index})
        except Exception as e:
            return _error_response('create_session_column', e)

    @app.route('/api/roster', methods=['POST'])
    def api_roster():
        data = _payload()
        try:
            roster = read_roster(
                data.get(fields.DOCUMENT_ID),
                data.get(fields.SHEET_NAME),
                data.get(fields.NAME_COL_INDEX),
                data.get(fields.START_ROW_INDEX),
                data.get(fields.ATTENDANCE_COL_INDEX),
            )
            return jsonify([entry.to_dict() for entry in roster])
        except Exception as e:
            return _error_response('read_roster', e)

    @app.route('/api/attendance', methods=['POST'])
    def api_attendance():
        data = _payload()
        # write_attendance reports its own failures
        result = write_attendance(
            data.get(fields.DOCUMENT_ID),
            data.get(fields.SHEET_NAME),
            data.get(fields.ROW_INDEX),
            data.get(fields.COL_INDEX),
            data.get(fields.STATUS, ''),
        )
        return jsonify(result)
