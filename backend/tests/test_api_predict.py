"""
API tests for applicant evaluation, prediction history and health.
"""

import json
import uuid

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from credit_engine.repositories.prediction_repository import PredictionRepository
from credit_engine.repositories.scoring_repository import ScoringConfigRepository

PREDICT = "/api/v1/predict"
PREDICTIONS = "/api/v1/predictions"
RULES = "/api/v1/rules"
FIELDS = "/api/v1/applicant-fields"


@pytest.fixture
def reject_bankrupt():
    return {
        "name": "Recent bankruptcy",
        "type": "eligibility",
        "condition": {"field": "bankruptcy", "operator": "==", "value": True},
        "action": "reject",
        "priority": 10,
    }


class TestPredict:
    """POST /predict."""

    def test_strong_applicant_is_approved(self, seeded_client, strong_applicant):
        response = seeded_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 200
        body = response.json()
        assert body["score"] == 784
        assert body["base_score"] == 784
        assert body["max_possible_score"] == 845
        assert body["approval_status"] == "Approved"
        assert body["risk_level"] == "Low Risk"
        assert body["score_interpretation"]["range"]["name"] == "Excellent"
        assert body["category_breakdown"]["financial"] == 230
        assert body["features"]["riskPrediction"] == "Low Risk"
        assert body["prediction_id"] is not None
        assert body["rules_applied"] == 0

    def test_score_rule_applied(self, seeded_client, strong_applicant):
        seeded_client.post(
            RULES,
            json={
                "name": "Strong bureau score",
                "type": "risk",
                "condition": {"field": "creditScore", "operator": ">", "value": 700},
                "action": "adjust_score",
                "action_value": {"adjustment": 5},
            },
        )

        body = seeded_client.post(PREDICT, json=strong_applicant).json()

        assert body["base_score"] == 784
        assert body["score"] == 789
        assert body["score_adjustment"] == 5
        assert body["rules_applied"] == 1

    def test_reject_override_wins_over_range(self, seeded_client, strong_applicant, reject_bankrupt):
        seeded_client.post(RULES, json=reject_bankrupt)
        strong_applicant["bankruptcy"] = True

        body = seeded_client.post(PREDICT, json=strong_applicant).json()

        assert body["score"] == 784
        assert body["approval_status"] == "Rejected"
        assert body["risk_level"] == "High Risk"

    def test_unconfigured_engine_falls_back(self, client, strong_applicant):
        body = client.post(PREDICT, json=strong_applicant).json()

        assert body["score"] == 300
        assert body["approval_status"] == "Manual Review"
        assert body["risk_level"] == "Unknown"

    def test_open_record_fields_accepted(self, seeded_client, strong_applicant):
        strong_applicant.update(
            {"homeowner": True, "employedSince": "2019-03-01", "region": "north"}
        )

        response = seeded_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 200
        assert response.json()["score"] == 784

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"age": 15},
            {"debtToIncomeRatio": 1.5},
            {"annualIncome": [75000]},
            {"employmentStatus": None},
        ],
    )
    def test_invalid_record_rejected(self, seeded_client, body):
        response = seeded_client.post(PREDICT, json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input data"
        assert response.json()["details"]

    @pytest.mark.parametrize("literal", ["Infinity", "-Infinity", "NaN"])
    def test_non_finite_numbers_rejected(self, seeded_client, literal):
        response = seeded_client.post(
            PREDICT,
            content=f'{{"annualIncome": {literal}, "age": 35}}',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input data"

    def test_non_finite_number_in_open_field_rejected(self, seeded_client, strong_applicant):
        body = json.dumps(strong_applicant)[:-1] + ', "riskIndex": NaN}'

        response = seeded_client.post(
            PREDICT, content=body, headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400

    def test_missing_factors_reported(self, seeded_client, strong_applicant):
        del strong_applicant["educationLevel"]

        body = seeded_client.post(PREDICT, json=strong_applicant).json()

        assert body["missing_factors"] == ["educationLevel"]
        assert body["score"] == 754

    def test_validation_details_name_the_field(self, seeded_client):
        details = seeded_client.post(PREDICT, json={"age": 15}).json()["details"]

        assert set(details[0]) == {"loc", "msg", "type"}
        assert "age" in details[0]["msg"]

    def test_same_input_same_decision(self, seeded_client, strong_applicant):
        first = seeded_client.post(PREDICT, json=strong_applicant).json()
        second = seeded_client.post(PREDICT, json=strong_applicant).json()

        assert first["score"] == second["score"]
        assert first["approval_status"] == second["approval_status"]
        assert first["prediction_id"] != second["prediction_id"]


class TestRequiredFields:
    """Active required applicant fields gate evaluation."""

    @pytest.fixture
    def fields_client(self, seeded_client):
        assert seeded_client.post(FIELDS + "/seed").status_code == 200
        return seeded_client

    def test_complete_record_is_evaluated(self, fields_client, strong_applicant):
        response = fields_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 200
        assert response.json()["score"] == 784

    def test_missing_required_field_rejected(self, fields_client, strong_applicant):
        del strong_applicant["age"]

        response = fields_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid input data"
        assert body["details"] == [
            {"loc": ["body", "age"], "msg": "Age is required", "type": "missing"}
        ]
        assert fields_client.get(PREDICTIONS).json()["total"] == 0

    @pytest.mark.parametrize("blank", ["", "   "])
    def test_blank_required_field_rejected(self, fields_client, strong_applicant, blank):
        strong_applicant["employmentStatus"] = blank

        response = fields_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 400
        assert response.json()["details"][0]["msg"] == "Employment Status is required"

    def test_every_missing_field_is_listed(self, fields_client):
        details = fields_client.post(PREDICT, json={"age": 40}).json()["details"]

        assert len(details) == 7
        assert "age" not in {d["loc"][1] for d in details}

    def test_inactive_field_is_not_required(self, fields_client, strong_applicant):
        fields = fields_client.get(FIELDS).json()
        age_id = next(f["id"] for f in fields if f["field_name"] == "age")
        fields_client.patch(f"{FIELDS}/{age_id}", json={"is_active": False})
        del strong_applicant["age"]

        response = fields_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 200
        assert response.json()["missing_factors"] == ["age"]

    def test_optional_field_is_not_required(self, fields_client, strong_applicant):
        fields = fields_client.get(FIELDS).json()
        age_id = next(f["id"] for f in fields if f["field_name"] == "age")
        fields_client.put(f"{FIELDS}/{age_id}", json={"is_required": False})
        del strong_applicant["age"]

        assert fields_client.post(PREDICT, json=strong_applicant).status_code == 200


class TestStoreFailures:
    """Decisions when the database misbehaves."""

    def test_audit_write_failure_still_returns_decision(
        self, seeded_client, strong_applicant, monkeypatch
    ):
        async def fail_write(self, prediction, executions):
            raise OperationalError("INSERT INTO predictions", {}, Exception("disk full"))

        monkeypatch.setattr(PredictionRepository, "create_with_executions", fail_write)

        response = seeded_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 200
        assert response.json()["score"] == 784
        assert response.json()["prediction_id"] is None
        assert seeded_client.get(PREDICTIONS).json()["total"] == 0

    def test_configuration_read_failure_is_store_unavailable(
        self, seeded_client, strong_applicant, monkeypatch
    ):
        async def fail_read(self):
            raise SQLAlchemyError("connection refused")

        monkeypatch.setattr(ScoringConfigRepository, "get_active_for_scoring", fail_read)

        response = seeded_client.post(PREDICT, json=strong_applicant)

        assert response.status_code == 500
        assert response.json()["error"] == "store_unavailable"
        assert response.json()["message"] == "Configuration store is unavailable"


class TestPredictionHistory:
    """Recorded decisions."""

    def test_detail_records_session_and_executions(
        self, seeded_client, strong_applicant, reject_bankrupt
    ):
        seeded_client.post(RULES, json=reject_bankrupt)
        prediction_id = seeded_client.post(
            PREDICT, json=strong_applicant, headers={"X-Session-Id": "session-42"}
        ).json()["prediction_id"]

        body = seeded_client.get(f"{PREDICTIONS}/{prediction_id}").json()

        assert body["user_session"] == "session-42"
        assert body["credit_score"] == 784
        assert body["applicant_data"] == strong_applicant
        assert len(body["applicant_hash"]) == 16
        assert len(body["rule_executions"]) == 1
        assert body["rule_executions"][0]["triggered"] is False

    def test_session_defaults_to_unknown(self, seeded_client, strong_applicant):
        prediction_id = seeded_client.post(PREDICT, json=strong_applicant).json()["prediction_id"]

        body = seeded_client.get(f"{PREDICTIONS}/{prediction_id}").json()

        assert body["user_session"] == "unknown"

    def test_same_record_same_hash(self, seeded_client, strong_applicant):
        first = seeded_client.post(PREDICT, json=strong_applicant).json()["prediction_id"]
        reordered = dict(reversed(list(strong_applicant.items())))
        second = seeded_client.post(PREDICT, json=reordered).json()["prediction_id"]

        first_hash = seeded_client.get(f"{PREDICTIONS}/{first}").json()["applicant_hash"]
        second_hash = seeded_client.get(f"{PREDICTIONS}/{second}").json()["applicant_hash"]

        assert first_hash == second_hash

    def test_list_is_paginated(self, seeded_client, strong_applicant):
        for _ in range(3):
            seeded_client.post(PREDICT, json=strong_applicant)

        body = seeded_client.get(PREDICTIONS, params={"page": 1, "page_size": 2}).json()

        assert body["total"] == 3
        assert body["total_pages"] == 2
        assert len(body["items"]) == 2

        last_page = seeded_client.get(PREDICTIONS, params={"page": 2, "page_size": 2}).json()
        assert len(last_page["items"]) == 1

    def test_empty_history(self, client):
        body = client.get(PREDICTIONS).json()

        assert body["total"] == 0
        assert body["total_pages"] == 1
        assert body["items"] == []

    def test_page_size_bounded(self, client):
        assert client.get(PREDICTIONS, params={"page_size": 500}).status_code == 400

    def test_unknown_prediction(self, client):
        response = client.get(f"{PREDICTIONS}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestServiceEndpoints:
    """Health and root."""

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["database"] == "healthy"

    def test_root(self, client):
        body = client.get("/").json()

        assert body["docs"] == "/api/docs"
        assert "model_version" in body
