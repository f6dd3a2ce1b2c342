# Supabase table: join_requests (schema documented in app/modules/groups/models.py)
# Status progression: pending -> approved -> funds_deposited, with a side exit to rejected.
# Moving to a new status upserts into the (group_id, user_id, status) row, adding
# the quantity, and deletes the row it came from.
