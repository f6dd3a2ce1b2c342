# Supabase table: site_info (single row, id = 1)

"""
site_info:
- id: int (primary key, always 1)
- contact_email, contact_phone, office_address: text (nullable)
- main_phone, investment_phone, support_email: text (nullable)
- business_hours_weekday, business_hours_saturday, business_hours_sunday: text (nullable)
"""

SITE_INFO_ID = 1
