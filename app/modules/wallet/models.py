# Supabase tables: wallets, bank_details, withdrawal_requests
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

wallets:
- id: uuid (primary key, references auth.users.id)
- balance: numeric (not null, default: 0)

bank_details:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, unique, not null)
- bank_name: text (not null)
- account_number: text (not null)
- account_holder_name: text (not null)
- swift_code: text (nullable)

withdrawal_requests:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, not null)
- amount: numeric (not null)
- status: text (not null, default: 'pending') - values: pending, approved, denied
- bank_details_id: uuid (foreign key to bank_details.id, nullable)
- admin_id: uuid (nullable) - admin who processed the request
- requested_at: timestamp (default: now())
- processed_at: timestamp (nullable)

RPC:
- decrement_balance(user_id uuid, amount numeric) - atomic wallet debit
"""

WITHDRAWAL_PENDING = "pending"
WITHDRAWAL_APPROVED = "approved"
WITHDRAWAL_DENIED = "denied"
