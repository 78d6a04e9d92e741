"""Utility functions for the application"""
from .csv_utils import sanitize_csv_value, sanitize_dataframe_for_csv, security_log_to_csv
from .rate_limiter import LockoutPolicy, LockoutState, format_lockout_message

__all__ = [
    "sanitize_csv_value",
    "sanitize_dataframe_for_csv",
    "security_log_to_csv",
    "LockoutPolicy",
    "LockoutState",
    "format_lockout_message",
]
