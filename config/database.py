"""
Database configuration and connection utilities for Supabase

VERSION HISTORY:
2.0.0 - Reduced to admin console needs - 10/19/26
      CHANGES:
      - Database.create_auth_client() builds a per-session client with the
        anon key (auth sessions are never shared between browser sessions)
      - ActivityLogger records admin gate events (login, forbidden, lockout,
        logout) in activity_logs
      - Removed user/role/module management tables
1.2.3 - Security enhancement: Error message sanitization - 11/12/25
      SECURITY IMPROVEMENTS:
      - Sanitized all error messages (no technical details exposed to users)
      - Added server-side logging with exc_info for debugging
1.0.0 - Initial Supabase singleton - 30/10/25
"""
import logging
from typing import Dict, List, Optional

import streamlit as st
from supabase import Client, create_client

from utils.errors import friendly_error_message

# Configure logging
logger = logging.getLogger(__name__)


class Database:
    """Handles Supabase client creation"""

    _instance: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        """Get or create the shared Supabase client used for table access"""
        if cls._instance is None:
            try:
                url = st.secrets["supabase"]["url"]
                key = st.secrets["supabase"]["service_role_key"]
                cls._instance = create_client(url, key)
            except Exception as e:
                st.error("Database connection failed. Please contact support.")
                logger.error(f"Failed to connect to database: {str(e)}", exc_info=True)
                st.stop()
        return cls._instance

    @staticmethod
    def create_auth_client() -> Client:
        """
        Create a fresh Supabase client for signing a user in

        Each browser session gets its own client so one user's auth session
        can never leak into another's.
        """
        url = st.secrets["supabase"]["url"]
        key = st.secrets["supabase"]["anon_key"]
        return create_client(url, key)

    @classmethod
    def reset_client(cls):
        """Reset the client (useful for testing or reconnecting)"""
        cls._instance = None


class ActivityLogger:
    """
    Activity logging for admin gate events

    Failures to write a log entry are reported server-side only and never
    interrupt the login flow.
    """

    @staticmethod
    def log(user_id: Optional[str], action_type: str, module_key: str = 'auth',
            description: str = None, metadata: Dict = None, success: bool = True) -> bool:
        """Log an activity entry"""
        try:
            db = Database.get_client()

            log_data = {
                'user_id': user_id,
                'action_type': action_type,
                'description': description,
                'module_key': module_key,
                'success': success,
                'metadata': metadata
            }

            db.table('activity_logs').insert(log_data).execute()
            return True
        except Exception as e:
            # Don't show error to user for logging failures
            logger.warning(f"Error logging activity {action_type}: {str(e)}")
            return False

    @staticmethod
    def get_logs(action_types: List[str] = None, limit: int = 100) -> List[Dict]:
        """Get recent auth activity, newest first"""
        try:
            db = Database.get_client()
            query = db.table('activity_logs').select('*').eq('module_key', 'auth')
            if action_types:
                query = query.in_('action_type', action_types)
            response = query.order('created_at', desc=True).limit(limit).execute()
            return response.data if response.data else []
        except Exception as e:
            st.error(friendly_error_message(e, "Unable to load activity logs. Please try again."))
            logger.error(f"Error fetching activity logs: {str(e)}", exc_info=True)
            return []
