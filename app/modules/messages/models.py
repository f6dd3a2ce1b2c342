# Supabase table: messages

"""
messages:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null) - recipient
- title: text (not null)
- body: text (not null)
- is_read: bool (not null, default: false)
- created_at: timestamp (default: now())
"""
