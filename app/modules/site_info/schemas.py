from pydantic import BaseModel
from typing import Optional


class SiteInfo(BaseModel):
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    office_address: Optional[str] = None
    main_phone: Optional[str] = None
    investment_phone: Optional[str] = None
    support_email: Optional[str] = None
    business_hours_weekday: Optional[str] = None
    business_hours_saturday: Optional[str] = None
    business_hours_sunday: Optional[str] = None
