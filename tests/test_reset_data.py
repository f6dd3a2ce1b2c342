import pytest

from app.scripts import reset_data


def test_reset_clears_requests_and_reopens_groups(supabase):
    locked = supabase.seed("groups", group_number="IPR00001", status="locked", total_members=25, max_members=25)
    supabase.seed("groups", group_number="IPR00002", status="active", total_members=25, max_members=25)
    supabase.seed("join_requests", group_id=locked["id"], user_id="member-1", status="approved", contracts_requested=25)

    assert reset_data.clear_join_requests(supabase) == 1
    assert reset_data.reset_groups(supabase) == 2

    assert supabase.rows("join_requests") == []
    assert {(g["status"], g["total_members"]) for g in supabase.rows("groups")} == {("open", 0)}


def test_main_requires_service_credentials(monkeypatch):
    monkeypatch.setattr(reset_data.settings, "supabase_url", "https://example.supabase.co")
    monkeypatch.setattr(reset_data.settings, "supabase_service_role_key", "")

    with pytest.raises(SystemExit) as exc:
        reset_data.main()

    assert exc.value.code == 1


def test_main_exits_nonzero_on_failure(monkeypatch, supabase):
    monkeypatch.setattr(reset_data.settings, "supabase_url", "https://example.supabase.co")
    monkeypatch.setattr(reset_data.settings, "supabase_service_role_key", "service-key")
    monkeypatch.setattr(reset_data, "get_service_supabase", lambda: supabase)
    supabase.fail("groups", "update")

    with pytest.raises(SystemExit) as exc:
        reset_data.main()

    assert exc.value.code == 1


def test_main_runs_both_steps(monkeypatch, supabase):
    monkeypatch.setattr(reset_data.settings, "supabase_url", "https://example.supabase.co")
    monkeypatch.setattr(reset_data.settings, "supabase_service_role_key", "service-key")
    monkeypatch.setattr(reset_data, "get_service_supabase", lambda: supabase)
    supabase.seed("groups", group_number="IPR00001", status="locked", total_members=25, max_members=25)

    reset_data.main()

    assert supabase.rows("groups")[0]["status"] == "open"
