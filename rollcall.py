import os

from flask import Flask

from routes.api import register_api_routes
from routes.home import register_home_routes

app = Flask(__name__)

# Register route modules
register_home_routes(app)
register_api_routes(app)

if __name__ == '__main__':
    app.run(debug=True, port=int(os.environ.get('PORT', 5001)))
