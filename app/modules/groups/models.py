# Supabase tables: groups, join_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and lifecycle.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- group_number: text (not null, unique) - e.g. IPR00001
- status: text (not null, default: 'open') - values: open, locked, active
- total_members: int (not null, default: 0) - cached approved + paid contract units
- max_members: int (not null, default: 25)
- created_at: timestamp (default: now())

join_requests:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- group_id: uuid (foreign key to groups.id, not null)
- status: text (not null, default: 'pending') - values: pending, approved, funds_deposited, rejected
- contracts_requested: int (nullable, treated as 1 when null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now(), bumped on update)
- unique constraint on (group_id, user_id, status)
"""

GROUP_OPEN = "open"
GROUP_LOCKED = "locked"
GROUP_ACTIVE = "active"

REQUEST_PENDING = "pending"
REQUEST_APPROVED = "approved"
REQUEST_PAID = "funds_deposited"
REQUEST_REJECTED = "rejected"

JOIN_REQUEST_CONFLICT_KEY = "group_id,user_id,status"
