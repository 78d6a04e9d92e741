"""Tests for the lockout countdown rendering."""
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

import auth.login
from auth.login import render_lockout_countdown


@pytest.fixture
def fake_st(monkeypatch):
    fake = MagicMock()
    monkeypatch.setattr(auth.login, "st", fake)
    return fake


def test_finished_lockout_reruns_without_message(fake_st):
    render_lockout_countdown(timedelta(0))

    fake_st.rerun.assert_called_once()
    fake_st.success.assert_not_called()
    fake_st.error.assert_not_called()


def test_active_lockout_shows_remaining_time(fake_st):
    render_lockout_countdown(timedelta(minutes=14, seconds=59))

    fake_st.rerun.assert_not_called()
    assert "14m 59s" in fake_st.error.call_args.args[0]
