from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, render_template_string, request, session, url_for

from .config import ENTRY_POINTS, SECRET_KEY
from .logging_utils import configure_logging
from .middleware import CsrfPreventionFilter, nonce_redirect

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_POINTS = "/,/health"

INDEX_TEMPLATE = """
<!doctype html>
<title>nonceguard</title>
<h1>Transfer</h1>
<form method="post" action="{{ nonce_url_for('transfer') }}">
  <input name="amount" value="10">
  <button type="submit">Send</button>
</form>
<a href="{{ nonce_url_for('history') }}">History</a>
"""

DONE_TEMPLATE = """
<!doctype html>
<title>nonceguard</title>
<p>Sent {{ amount }}.</p>
<a href="{{ nonce_url_for('index') }}">Back</a>
"""

HISTORY_TEMPLATE = """
<!doctype html>
<title>nonceguard</title>
<ul>
{% for amount in transfers %}<li>{{ amount }}</li>{% endfor %}
</ul>
<a href="{{ encode_url(url_for('index') + '#top') }}">Back</a>
"""


def create_app(config: Optional[dict] = None) -> Flask:
    app = Flask(__name__)
    app.secret_key = SECRET_KEY
    app.config["CSRF_ENTRY_POINTS"] = ENTRY_POINTS or DEFAULT_ENTRY_POINTS
    if config:
        app.config.update(config)

    configure_logging()
    CsrfPreventionFilter(app)

    @app.route("/")
    def index():
        return render_template_string(INDEX_TEMPLATE)

    @app.route("/transfer", methods=["POST"])
    def transfer():
        amount = request.form.get("amount", "").strip()
        if not amount.isdigit():
            return "Invalid amount", 400
        transfers = session.get("transfers", [])
        transfers.append(int(amount))
        session["transfers"] = transfers
        logger.info("transfer accepted amount=%s", amount)
        return nonce_redirect(url_for("done", amount=amount))

    @app.route("/done")
    def done():
        return render_template_string(DONE_TEMPLATE, amount=request.args.get("amount", ""))

    @app.route("/history")
    def history():
        return render_template_string(HISTORY_TEMPLATE, transfers=session.get("transfers", []))

    @app.route("/health")
    def health():
        return jsonify({"status": "ok"})

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
