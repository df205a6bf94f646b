# Supabase table: users (public profile rows, one per auth user)
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users ON DELETE CASCADE)
- name: text (not null)
- profile: text (default: '') - public URL of the profile picture in the profile_pictures bucket
- email: text (unique, not null)
- bio: text (default: '')
- created_at: timestamptz (default: now() at utc, not null)
- updated_at: timestamptz (default: now() at utc, not null; bumped by handle_updated_at trigger)

Row level security:
- select: everyone
- insert: auth.uid() = id
- update: auth.uid() = id

Profile rows are created by the application on first sign-in, not by a database trigger.
"""
