# Supabase table: phone_verification_codes (written with the service_role client)

"""
phone_verification_codes:
- id: uuid (primary key)
- email: text (not null) - at most one live code per email
- code: text (not null) - 6 digits
- new_phone: text (not null) - phone number awaiting confirmation
- expires_at: timestamp (not null) - created_at + 10 minutes
"""

ACTION_SEND = "send"
ACTION_VERIFY = "verify"
