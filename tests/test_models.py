"""
Unit tests for data models
"""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from src.models import (
    ApiKeyStatus,
    AuthUser,
    CurrentUser,
    Customer,
    CustomerQuery,
    DashboardStats,
    DraftResponse,
    KnowledgeBaseEntry,
    PendingInvitation,
    QueryMessage,
    QueryStatus,
    QueryVolume,
    QueryVolumePoint,
    UserProfile,
    format_date,
    initials_from_name,
    provider_name,
)

from conftest import make_message, make_query


class TestHelpers:
    """Display helpers"""

    def test_initials_from_name(self):
        assert initials_from_name("Jane Doe") == "JD"
        assert initials_from_name("jane van der doe") == "JD"
        assert initials_from_name("Cher") == "C"
        assert initials_from_name(None) == ""
        assert initials_from_name("   ") == ""

    def test_format_date(self):
        moment = datetime(2026, 10, 12, 9, 30, tzinfo=timezone.utc)
        assert format_date(moment) == "Oct 12, 2026, 09:30 AM"
        assert format_date(moment, with_time=False) == "Oct 12, 2026"
        assert format_date("2026-10-12T09:30:00Z") == "Oct 12, 2026, 09:30 AM"

    def test_format_date_missing_and_invalid(self):
        assert format_date(None) == "N/A"
        assert format_date("") == "N/A"
        assert format_date("yesterday") == "Invalid Date"


class TestCustomerQuery:
    def test_parses_backend_payload(self):
        query = CustomerQuery.model_validate(make_query(extra_field="kept"))
        assert query.id == "q-1"
        assert query.received_at.year == 2026
        assert query.model_extra == {"extra_field": "kept"}

    def test_display_fallbacks(self):
        query = CustomerQuery.model_validate(make_query(sender_name=None, subject=None))
        assert query.display_name == "alice.smith@customer.io"
        assert query.display_subject == "No Subject"

    def test_initials_from_sender_name(self):
        query = CustomerQuery.model_validate(make_query(sender_name="Alice Mary Smith"))
        assert query.initials == "AS"

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("alice.smith@customer.io", "AS"),
            ("bob@customer.io", "BO"),
            ("x@customer.io", "X"),
            ("", "??"),
        ],
    )
    def test_initials_from_email(self, identifier, expected):
        query = CustomerQuery.model_validate(make_query(sender_name=None, sender_identifier=identifier))
        assert query.initials == expected

    def test_awaiting_agent(self):
        assert CustomerQuery.model_validate(make_query(status="new")).awaiting_agent
        assert CustomerQuery.model_validate(make_query(status="customer_reply")).awaiting_agent
        assert not CustomerQuery.model_validate(make_query(status="agent_replied")).awaiting_agent
        assert not CustomerQuery.model_validate(make_query(status="closed")).awaiting_agent

    def test_missing_required_field(self):
        payload = make_query()
        del payload["body_text"]
        with pytest.raises(ValidationError):
            CustomerQuery.model_validate(payload)


class TestQueryMessage:
    def test_sender_checks(self):
        customer = QueryMessage.model_validate(make_message())
        agent = QueryMessage.model_validate(make_message(sender_type="agent"))
        note = QueryMessage.model_validate(make_message(sender_type="system_note"))

        assert customer.from_customer and not customer.from_agent
        assert agent.from_agent and not agent.from_customer
        assert not note.from_customer and not note.from_agent


class TestDraftResponse:
    @pytest.mark.parametrize(
        "source,label",
        [
            ("openai_rag", "OpenAI RAG"),
            ("openai_rag_no_context", "OpenAI (No Context)"),
            ("tfidf_retrieval", "Knowledge Base (TF-IDF)"),
            ("tfidf_retrieval_no_match", "KB Search (Limited Info)"),
            ("tfidf_retrieval_failed", "KB Search (Limited Info)"),
            ("tfidf_failed", "KB Search (Limited Info)"),
            ("something_new", "AI Generated"),
            ("no_kb_content", None),
            (None, None),
        ],
    )
    def test_source_label(self, source, label):
        draft = DraftResponse(generated_response="Hello", source=source)
        assert draft.source_label == label

    def test_no_label_without_text(self):
        assert DraftResponse(generated_response="", source="openai_rag").source_label is None

    def test_context_count_visibility(self):
        assert DraftResponse(generated_response="x", source="openai_rag", retrieved_context_count=3).shows_context_count
        assert DraftResponse(generated_response="x", source="tfidf_retrieval", retrieved_context_count=1).shows_context_count
        assert not DraftResponse(generated_response="x", source="openai_rag", retrieved_context_count=0).shows_context_count
        assert not DraftResponse(generated_response="x", source="custom", retrieved_context_count=5).shows_context_count

    def test_confidence(self):
        assert DraftResponse(source="openai_rag").is_confident
        assert not DraftResponse(source="openai_rag_no_context").is_confident
        assert not DraftResponse(source="tfidf_failed").is_confident
        assert DraftResponse(source="no_kb_content").is_empty_knowledge_base

    def test_null_draft_text_is_empty(self):
        draft = DraftResponse.model_validate({"generated_response": None, "source": "no_kb_content"})
        assert draft.generated_response == ""
        assert draft.source_label is None

    def test_non_text_draft_is_rejected(self):
        with pytest.raises(ValidationError):
            DraftResponse.model_validate({"generated_response": 123})


class TestCustomer:
    def test_initials(self):
        assert Customer(email="bob@example.com", name="Bob Stone").initials == "BS"
        assert Customer(email="bob@example.com").initials == "BO"
        assert Customer(email="").initials == "??"

    def test_matches_name_or_email(self):
        customer = Customer(email="Bob@Example.com", name="Bob Stone", total_queries=2)
        assert customer.matches("stone")
        assert customer.matches("EXAMPLE")
        assert not customer.matches("alice")
        assert Customer(email="x@y.z").matches("x@")


class TestDashboardModels:
    def test_status_breakdown_skips_empty(self):
        stats = DashboardStats(total_queries=5, new_queries=2, closed_queries=3)
        assert stats.status_breakdown() == {"new": 2, "closed": 3}

    def test_weekday_label(self):
        point = QueryVolumePoint.model_validate({"date": "2026-10-19", "query_count": 4})
        assert point.date == date(2026, 10, 19)
        assert point.weekday_label == "Mon"

    def test_volume_peak(self):
        volume = QueryVolume.model_validate(
            {"data": [{"date": "2026-10-18", "query_count": 1}, {"date": "2026-10-19", "query_count": 6}], "period_days": 2}
        )
        assert volume.peak == 6
        assert QueryVolume().peak == 0


class TestAuthModels:
    def test_current_user_initials(self):
        user = CurrentUser(user=AuthUser(id="u", email="jane@example.com"), access_token="t")
        assert user.initials == "JA"

        user.profile = UserProfile(id="u", full_name="Jane Doe", organization_id="o")
        assert user.initials == "JD"
        assert user.organization_id == "o"

    def test_current_user_without_email(self):
        user = CurrentUser(user=AuthUser(id="u"), access_token="t")
        assert user.initials == ".."

    def test_profile_organization(self):
        assert not UserProfile(id="u").has_organization
        assert UserProfile(id="u", organization_id="o").has_organization


class TestOtherRecords:
    def test_knowledge_base_entry_optional_fields(self):
        entry = KnowledgeBaseEntry(content="Returns within 30 days.")
        assert entry.content == "Returns within 30 days."
        assert entry.id is None

    def test_backend_text_is_kept_verbatim(self):
        """Indentation in stored content and drafts survives validation."""
        entry = KnowledgeBaseEntry(content="Steps:\n  1. Open settings\n  2. Save\n")
        draft = DraftResponse(generated_response="  Hi Ana,\n\n  Thanks!\n")

        assert entry.content == "Steps:\n  1. Open settings\n  2. Save\n"
        assert draft.generated_response == "  Hi Ana,\n\n  Thanks!\n"

    def test_pending_invitation(self):
        invitation = PendingInvitation.model_validate(
            {
                "id": "i-1",
                "email": "new@example.com",
                "role": "agent",
                "status": "pending",
                "created_at": "2026-10-12T09:30:00Z",
                "expires_at": "2026-10-19T09:30:00Z",
            }
        )
        assert invitation.invited_by_user_id is None
        assert (invitation.expires_at - invitation.created_at).days == 7

    def test_api_key_status_configured(self):
        status = ApiKeyStatus.model_validate({"openai": True, "anthropic": False, "note": "x"})
        assert status.configured() == {"openai": True, "anthropic": False}
        assert ApiKeyStatus().configured() == {"openai": False}

    def test_provider_name(self):
        assert provider_name("openai") == "OpenAI"
        assert provider_name("azure_openai") == "Azure Openai"

    def test_query_status_values(self):
        assert [s.value for s in QueryStatus] == ["new", "customer_reply", "agent_replied", "closed"]
