from flask import render_template

from models import fields

VIEWPORT = 'width=device-width, initial-scale=1'


def register_home_routes(app):
    """Register the page route"""

    @app.route('/')
    def home():
        return render_template('index.html',
                               viewport=VIEWPORT,
                               status_codes=fields.STATUS_CODES,
                               header_row=fields.HEADER_ROW)
