"""Tests for security log summaries and error messages."""
import pandas as pd

from components.admin_panel import summarize_security_events
from utils.csv_utils import sanitize_dataframe_for_csv, security_log_to_csv
from utils.errors import InvalidCredentialsError, friendly_error_message


def test_summarize_security_events():
    df = pd.DataFrame({
        'action_type': ['login', 'login_failed', 'login_failed', 'login_lockout', 'login_forbidden', 'logout'],
        'success': [True, False, False, False, False, True],
    })
    assert summarize_security_events(df) == {
        'total': 6, 'logins': 1, 'failures': 2, 'lockouts': 1, 'forbidden': 1
    }


def test_summarize_empty():
    assert summarize_security_events(pd.DataFrame())['total'] == 0


def test_log_export_neutralizes_formulas():
    df = pd.DataFrame({'description': ['=HYPERLINK("x")', 'Admin o***@example.com logged in']})
    safe = sanitize_dataframe_for_csv(df)
    assert safe['description'][0].startswith("'=")
    assert safe['description'][1] == 'Admin o***@example.com logged in'
    assert "'=HYPERLINK" in security_log_to_csv(df)


def test_friendly_error_message():
    assert friendly_error_message(InvalidCredentialsError()) == "Invalid email or password"
    assert "network" in friendly_error_message(Exception("network unreachable"))
    assert "too long" in friendly_error_message(Exception("read timed out"))
    assert friendly_error_message(None, "fallback") == "fallback"
