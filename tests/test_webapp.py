import re

from flask import Flask

from nonceguard.middleware import CsrfPreventionFilter, encode_url, get_filter
from nonceguard.webapp import create_app

NONCE_RE = re.compile(r"CSRF_NONCE=([0-9A-F]{32})")


def _client():
    app = create_app({"TESTING": True, "CSRF_ENTRY_POINTS": "/, /health"})
    return app, app.test_client()


def _nonce_from(text: str) -> str:
    match = NONCE_RE.search(text)
    assert match, text
    return match.group(1)


def test_entry_point_page_embeds_nonce():
    _, client = _client()
    r = client.get("/")
    assert r.status_code == 200
    assert re.search(r'action="/transfer\?CSRF_NONCE=[0-9A-F]{32}"', r.get_data(as_text=True))


def test_first_request_without_nonce_is_accepted():
    _, client = _client()
    r = client.post("/transfer", data={"amount": "5"})
    assert r.status_code == 302
    assert NONCE_RE.search(r.headers["Location"])


def test_post_without_nonce_after_first_request_is_forbidden():
    _, client = _client()
    client.get("/")
    r = client.post("/transfer", data={"amount": "5"})
    assert r.status_code == 403


def test_forged_nonce_is_forbidden_and_view_not_run():
    _, client = _client()
    client.get("/")
    r = client.post("/transfer?CSRF_NONCE=" + "0" * 32, data={"amount": "5"})
    assert r.status_code == 403
    with client.session_transaction() as sess:
        assert "transfers" not in sess


def test_full_round_trip_with_redirect():
    _, client = _client()
    nonce = _nonce_from(client.get("/").get_data(as_text=True))

    r = client.post(f"/transfer?CSRF_NONCE={nonce}", data={"amount": "7"})
    assert r.status_code == 302
    location = r.headers["Location"]
    assert "/done?amount=7&CSRF_NONCE=" in location

    r = client.get(location)
    assert r.status_code == 200
    assert "Sent 7." in r.get_data(as_text=True)


def test_nonce_in_form_body_is_accepted():
    _, client = _client()
    nonce = _nonce_from(client.get("/").get_data(as_text=True))
    r = client.post("/transfer", data={"amount": "3", "CSRF_NONCE": nonce})
    assert r.status_code == 302


def test_non_entry_point_get_requires_nonce():
    _, client = _client()
    client.get("/")
    assert client.get("/history").status_code == 403


def test_anchor_link_keeps_anchor_before_nonce():
    _, client = _client()
    nonce = _nonce_from(client.get("/").get_data(as_text=True))
    body = client.get(f"/history?CSRF_NONCE={nonce}").get_data(as_text=True)
    assert re.search(r'href="/#top\?CSRF_NONCE=[0-9A-F]{32}"', body)


def test_health_is_an_entry_point():
    _, client = _client()
    client.get("/")
    assert client.get("/health").status_code == 200


def test_custom_deny_status_and_param():
    app = Flask(__name__)
    app.secret_key = "test"
    CsrfPreventionFilter(app, entry_points="/", nonce_param="token", deny_status=400)

    @app.route("/")
    def index():
        return encode_url("/next")

    @app.route("/next", methods=["GET", "POST"])
    def next_page():
        return "ok"

    client = app.test_client()
    link = client.get("/").get_data(as_text=True)
    assert link.startswith("/next?token=")
    assert client.post(link).status_code == 200
    assert client.post("/next").status_code == 400


def test_filter_registered_as_extension():
    app, _ = _client()
    with app.test_request_context("/"):
        protection = get_filter()
        assert isinstance(protection, CsrfPreventionFilter)
        assert protection.nonce_param == "CSRF_NONCE"
        assert protection.validator.entry_points == frozenset({"/", "/health"})
