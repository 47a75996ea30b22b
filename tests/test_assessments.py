"""Tests for assessment submission, persistence and API endpoints."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from askapril.core.errors import (
    CompanyAnalyticsNotFoundError,
    PersistenceError,
    ValidationError,
)


def _payload(**overrides):
    payload = {
        "firstName": "  Jo ",
        "email": "jo@x.com",
        "assessmentAnswers": {
            "q1": 2, "q2": 8, "q3": 7, "q4": 6, "q5": 5, "q6": 4, "q7": 4, "q8": 4, "q9": 5,
        },
        "totalScore": 45,
        "percentageScore": 40,
    }
    payload.update(overrides)
    return payload


def _echo_insert(record):
    """Stand-in for insert_assessment returning the record with an id."""
    return {"id": "assessment-1", **record}


# =============================================================================
# Validation
# =============================================================================


class TestValidateSubmission:
    def test_normalizes_name_and_email(self):
        from askapril.core.assessments import validate_submission

        submission = validate_submission(_payload(email="  A@B.com "))

        assert submission.first_name == "Jo"
        assert submission.email == "a@b.com"

    def test_rejects_malformed_email(self):
        from askapril.core.assessments import validate_submission

        with pytest.raises(ValidationError):
            validate_submission(_payload(email="not-an-email"))

    @pytest.mark.parametrize(
        "field,value",
        [
            ("firstName", None),
            ("firstName", "   "),
            ("email", ""),
            ("assessmentAnswers", {}),
            ("totalScore", None),
        ],
    )
    def test_rejects_absent_required_field(self, field, value):
        from askapril.core.assessments import validate_submission

        with pytest.raises(ValidationError) as exc_info:
            validate_submission(_payload(**{field: value}))

        assert exc_info.value.extra["required"] == [
            "firstName",
            "email",
            "assessmentAnswers",
            "totalScore",
        ]

    def test_zero_total_score_is_present(self):
        from askapril.core.assessments import validate_submission

        submission = validate_submission(_payload(totalScore=0))
        assert submission.total_score == 0

    def test_trims_company_code(self):
        from askapril.core.assessments import validate_submission

        assert validate_submission(_payload(companyCode=" ACME ")).company_code == "ACME"
        assert validate_submission(_payload(companyCode="  ")).company_code is None


# =============================================================================
# Submission
# =============================================================================


class TestSubmit:
    def test_jo_scenario(self):
        """Priority from the lowest answer, band from the supplied percentage."""
        with patch("askapril.core.assessments.assessments_db.insert_assessment", side_effect=_echo_insert) as mock_insert:
            from askapril.core.assessments import submit

            result = submit(_payload())

        record = mock_insert.call_args[0][0]
        assert record["first_name"] == "Jo"
        assert record["priority_step_name"] == "Right Person, Right Role"
        assert record["priority_step_score"] == 2
        assert record["step_1_score"] == 2
        assert record["step_9_score"] == 5
        assert record["percentage_score"] == 40
        assert record["source"] == "web_assessment"

        assert result.id == "assessment-1"
        assert result.priority_step.name == "Right Person, Right Role"
        assert result.score_description.startswith("Emerging Leadership")
        assert result.company_analytics is None

    def test_band_from_engine_percentage_when_not_supplied(self):
        payload = _payload()
        del payload["percentageScore"]
        payload["assessmentAnswers"] = {f"q{i}": 9 for i in range(1, 10)}

        with patch("askapril.core.assessments.assessments_db.insert_assessment", side_effect=_echo_insert):
            from askapril.core.assessments import submit

            result = submit(payload)

        assert result.percentage_score == 90.0
        assert result.score_description.startswith("Exceptional Leadership")

    def test_validation_precedes_persistence(self):
        with patch("askapril.core.assessments.assessments_db.insert_assessment") as mock_insert:
            from askapril.core.assessments import submit

            with pytest.raises(ValidationError):
                submit(_payload(email="not-an-email"))

        mock_insert.assert_not_called()

    def test_fetches_company_analytics(self):
        analytics = {"company_code": "ACME", "total_assessments": 3}

        with (
            patch("askapril.core.assessments.assessments_db.insert_assessment", side_effect=_echo_insert),
            patch("askapril.core.assessments.assessments_db.get_company_analytics", return_value=analytics) as mock_get,
        ):
            from askapril.core.assessments import submit

            result = submit(_payload(companyCode=" ACME "))

        mock_get.assert_called_once_with("ACME")
        assert result.company_analytics == analytics

    def test_analytics_failure_yields_null(self):
        with (
            patch("askapril.core.assessments.assessments_db.insert_assessment", side_effect=_echo_insert),
            patch("askapril.core.assessments.assessments_db.get_company_analytics", side_effect=Exception("boom")),
        ):
            from askapril.core.assessments import submit

            result = submit(_payload(companyCode="ACME"))

        assert result.company_analytics is None

    def test_insert_failure_propagates(self):
        with patch(
            "askapril.core.assessments.assessments_db.insert_assessment",
            side_effect=PersistenceError("insert failed"),
        ):
            from askapril.core.assessments import submit

            with pytest.raises(PersistenceError):
                submit(_payload())


class TestCompanyAnalyticsView:
    def test_missing_code(self):
        from askapril.core.assessments import get_company_analytics_view

        with pytest.raises(ValidationError):
            get_company_analytics_view(None)

    def test_no_aggregate(self):
        with patch("askapril.core.assessments.assessments_db.get_company_analytics", return_value=None):
            from askapril.core.assessments import get_company_analytics_view

            with pytest.raises(CompanyAnalyticsNotFoundError):
                get_company_analytics_view("ACME")

    def test_returns_recent_assessments(self):
        recent = [{"id": "a1", "first_name": "Jo", "percentage_score": 40}]

        with (
            patch("askapril.core.assessments.assessments_db.get_company_analytics", return_value={"avg": 55}),
            patch("askapril.core.assessments.assessments_db.list_recent_company_assessments", return_value=recent),
        ):
            from askapril.core.assessments import get_company_analytics_view

            view = get_company_analytics_view("ACME")

        assert view.analytics == {"avg": 55}
        assert view.recent_assessments == recent


# =============================================================================
# Database Operation Tests
# =============================================================================


class TestAssessmentDbOperations:
    def test_insert_assessment(self):
        mock_response = MagicMock()
        mock_response.data = [{"id": "row-1", "first_name": "Jo"}]

        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.return_value = mock_response

        with patch("askapril.db.assessments.get_supabase", return_value=mock_supabase):
            from askapril.db.assessments import insert_assessment

            stored = insert_assessment({"first_name": "Jo"})

        assert stored["id"] == "row-1"
        mock_supabase.table.assert_called_with("accountability_assessments")

    def test_insert_assessment_error(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.side_effect = Exception("db down")

        with patch("askapril.db.assessments.get_supabase", return_value=mock_supabase):
            from askapril.db.assessments import insert_assessment

            with pytest.raises(PersistenceError):
                insert_assessment({"first_name": "Jo"})

    def test_insert_assessment_no_data(self):
        mock_response = MagicMock()
        mock_response.data = []

        mock_supabase = MagicMock()
        mock_supabase.table.return_value.insert.return_value.execute.return_value = mock_response

        with patch("askapril.db.assessments.get_supabase", return_value=mock_supabase):
            from askapril.db.assessments import insert_assessment

            with pytest.raises(PersistenceError):
                insert_assessment({"first_name": "Jo"})

    def test_get_company_analytics_missing(self):
        mock_supabase = MagicMock()
        mock_supabase.table.return_value.select.return_value.eq.return_value.maybe_single.return_value.execute.return_value = None

        with patch("askapril.db.assessments.get_supabase", return_value=mock_supabase):
            from askapril.db.assessments import get_company_analytics

            assert get_company_analytics("ACME") is None

    def test_list_recent_company_assessments(self):
        mock_response = MagicMock()
        mock_response.data = [{"id": "a1"}, {"id": "a2"}]

        mock_supabase = MagicMock()
        chain = mock_supabase.table.return_value.select.return_value.eq.return_value
        chain.order.return_value.limit.return_value.execute.return_value = mock_response

        with patch("askapril.db.assessments.get_supabase", return_value=mock_supabase):
            from askapril.db.assessments import list_recent_company_assessments

            rows = list_recent_company_assessments("ACME")

        assert [row["id"] for row in rows] == ["a1", "a2"]
        chain.order.assert_called_once_with("completed_at", desc=True)
        chain.order.return_value.limit.assert_called_once_with(10)


# =============================================================================
# API Endpoint Tests
# =============================================================================


class TestAssessmentEndpoints:
    @pytest.fixture
    def client(self):
        from askapril.main import app

        return TestClient(app)

    def test_submit_success(self, client):
        with patch("askapril.core.assessments.assessments_db.insert_assessment", side_effect=_echo_insert):
            response = client.post("/api/assessment", json=_payload(email="A@B.com"))

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Assessment saved successfully"
        assert data["data"]["email"] == "a@b.com"
        assert data["data"]["priorityStep"]["name"] == "Right Person, Right Role"
        assert data["data"]["companyAnalytics"] is None

    def test_submit_missing_fields(self, client):
        response = client.post("/api/assessment", json={"firstName": "Jo"})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["error"] == "validation_error"
        assert "totalScore" in detail["required"]

    def test_submit_persistence_failure(self, client):
        with patch(
            "askapril.core.assessments.assessments_db.insert_assessment",
            side_effect=PersistenceError("relation does not exist"),
        ):
            response = client.post("/api/assessment", json=_payload())

        assert response.status_code == 500
        assert response.json()["detail"]["message"] == "relation does not exist"

    def test_company_analytics_missing_code(self, client):
        response = client.get("/api/assessment")
        assert response.status_code == 400

    def test_company_analytics_not_found(self, client):
        with patch("askapril.core.assessments.assessments_db.get_company_analytics", return_value=None):
            response = client.get("/api/assessment", params={"companyCode": "NOPE"})

        assert response.status_code == 404
        assert response.json()["detail"]["message"] == "No assessments yet for this company code"

    def test_company_analytics_found(self, client):
        with (
            patch("askapril.core.assessments.assessments_db.get_company_analytics", return_value={"avg": 55}),
            patch("askapril.core.assessments.assessments_db.list_recent_company_assessments", return_value=[]),
        ):
            response = client.get("/api/assessment", params={"companyCode": "ACME"})

        assert response.status_code == 200
        data = response.json()
        assert data["companyCode"] == "ACME"
        assert data["analytics"] == {"avg": 55}
        assert data["recentAssessments"] == []
