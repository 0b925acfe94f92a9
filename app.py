import os
from flask import Flask

from routes import routes_bp

app = Flask(__name__)
app.config.from_object("config")
app.config.setdefault("MAX_CONTENT_LENGTH", 100 * 1024 * 1024)

app.register_blueprint(routes_bp)


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3000)))
