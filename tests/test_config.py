from nonceguard.config import parse_entry_points


def test_parse_entry_points_trims_whitespace():
    assert parse_entry_points(" /, /health ,/login") == frozenset({"/", "/health", "/login"})


def test_parse_entry_points_drops_empty_entries():
    assert parse_entry_points("") == frozenset()
    assert parse_entry_points(None) == frozenset()
    assert parse_entry_points("/a,,/b,") == frozenset({"/a", "/b"})


def test_parse_entry_points_accepts_iterables():
    assert parse_entry_points(["/a ", "/b"]) == frozenset({"/a", "/b"})
