# Supabase table: profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id)
- first_name: text (not null)
- last_name: text (not null)
- phone: text (nullable)
- email: text (nullable) - copied from the signup form
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Profiles are created on signup and never hard-deleted.
"""
