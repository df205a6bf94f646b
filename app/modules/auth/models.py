# Supabase Auth
# This module uses Supabase's built-in authentication system (email/password)
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table), with name and bio kept in user_metadata
# - Email verification before first sign-in
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.admin.sign_out() - Revoke a JWT

The signed-in user, their profile row and their session tokens are mirrored in the
session cache (session_cache.py) for 24 hours so that restoring a session does not
need a round trip to Supabase Auth.
"""
