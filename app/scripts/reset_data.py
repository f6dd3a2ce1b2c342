"""
Reset Demo Data Script
Deletes every join request and puts every group back to open with zero members.
Needs SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY. For demo/test environments only.

Usage: python -m app.scripts.reset_data
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

from app.config.settings import settings
from app.database.supabase_client import get_service_supabase
from app.modules.groups.models import GROUP_OPEN
from supabase import Client
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def clear_join_requests(supabase: Client) -> int:
    """Delete all join requests"""
    logger.info("Deleting join requests...")
    result = supabase.table("join_requests")\
        .delete()\
        .not_.is_("id", "null")\
        .execute()
    count = len(result.data or [])
    logger.info(f"Deleted {count} join request(s)")
    return count


def reset_groups(supabase: Client) -> int:
    """Reset every group to open with zero members"""
    logger.info("Resetting groups...")
    result = supabase.table("groups")\
        .update({"total_members": 0, "status": GROUP_OPEN})\
        .not_.is_("id", "null")\
        .execute()
    count = len(result.data or [])
    logger.info(f"Reset {count} group(s)")
    return count


def main():
    """Main function to reset demo data"""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        logger.error("Missing SUPABASE_URL or SUPABASE_SERVICE_ROLE_KEY environment variable")
        sys.exit(1)
    try:
        supabase = get_service_supabase()
        clear_join_requests(supabase)
        reset_groups(supabase)
        logger.info("Reset complete: cleared join_requests and reset groups")
    except Exception as e:
        logger.error(f"Reset failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
