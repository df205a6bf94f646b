# Supabase table: magic_tricks, view: magic_tricks_with_users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

magic_tricks:
- id: uuid (primary key, default: gen_random_uuid())
- user_id: uuid (foreign key to users.id ON DELETE CASCADE, not null)
- title: text (not null)
- description: text (not null)
- instructions: jsonb (not null, default: '[]') - ordered list of step strings
- difficulty: text (not null) - check: 'Easy', 'Medium', 'Hard'
- overall_rating: decimal(3,2) (default: 0.00) - check: 0 <= overall_rating <= 5
- created_at: timestamptz (default: now() at utc, not null)
- updated_at: timestamptz (default: now() at utc, not null; bumped by handle_updated_at trigger)

Indexes: user_id, difficulty, created_at desc.

Row level security:
- select: everyone
- insert/update/delete: auth.uid() = user_id

magic_tricks_with_users (read-only view):
- every magic_tricks column
- user_name, user_profile, user_bio: joined from users on user_id
"""
