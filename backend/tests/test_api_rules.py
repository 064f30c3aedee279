"""
API tests for rule management and standalone rule execution.
"""

import json
import uuid

import pytest

BASE = "/api/v1/rules"


@pytest.fixture
def bureau_rule():
    return {
        "name": "Strong bureau score",
        "description": "Small bonus for applicants above 700",
        "type": "risk",
        "category": "credit",
        "condition": {"field": "creditScore", "operator": ">", "value": 700},
        "action": "adjust_score",
        "action_value": {"adjustment": 5, "reason": "Bureau score above 700"},
        "priority": 7,
    }


@pytest.fixture
def approve_rule():
    return {
        "name": "Homeowner fast track",
        "type": "eligibility",
        "condition": {"field": "homeowner", "operator": "==", "value": True},
        "action": "approve",
    }


class TestRuleCrud:
    """Create, read, update, toggle and list."""

    def test_create(self, client, bureau_rule):
        response = client.post(BASE, json=bureau_rule)

        assert response.status_code == 201
        body = response.json()
        assert body["condition"] == {"field": "creditScore", "operator": ">", "value": 700}
        assert body["action_value"]["adjustment"] == 5
        assert body["is_active"] is True

    def test_condition_accepted_as_json_string(self, client, bureau_rule):
        bureau_rule["condition"] = json.dumps(bureau_rule["condition"])

        response = client.post(BASE, json=bureau_rule)

        assert response.status_code == 201
        assert response.json()["condition"]["field"] == "creditScore"

    @pytest.mark.parametrize(
        "condition",
        [
            {"field": "creditScore", "operator": "~=", "value": 700},
            {"field": "", "operator": ">", "value": 700},
            {"field": "creditScore", "operator": ">"},
            "not json",
        ],
    )
    def test_invalid_condition_rejected(self, client, bureau_rule, condition):
        bureau_rule["condition"] = condition

        response = client.post(BASE, json=bureau_rule)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input data"

    def test_payload_must_match_action(self, client, bureau_rule):
        bureau_rule["action_value"] = {"reason": "no adjustment"}

        assert client.post(BASE, json=bureau_rule).status_code == 400

    def test_unknown_action_rejected(self, client, bureau_rule):
        bureau_rule["action"] = "escalate"

        assert client.post(BASE, json=bureau_rule).status_code == 400

    def test_get_with_recent_executions(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        body = client.get(f"{BASE}/{rule_id}").json()

        assert body["name"] == "Strong bureau score"
        assert body["recent_executions"] == []

    def test_update(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        response = client.put(f"{BASE}/{rule_id}", json={"priority": 9, "category": "bureau"})

        assert response.status_code == 200
        assert response.json()["priority"] == 9
        assert response.json()["category"] == "bureau"

    def test_update_null_for_required_column_rejected(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        response = client.put(f"{BASE}/{rule_id}", json={"name": None, "priority": None})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input data"
        assert "name" in response.json()["details"][0]["msg"]
        assert client.get(f"{BASE}/{rule_id}").json()["priority"] == 7

    def test_update_null_clears_description(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        response = client.put(f"{BASE}/{rule_id}", json={"description": None})

        assert response.status_code == 200
        assert response.json()["description"] is None

    def test_update_revalidates_action_payload(self, client, approve_rule):
        rule_id = client.post(BASE, json=approve_rule).json()["id"]

        response = client.put(f"{BASE}/{rule_id}", json={"action": "adjust_score"})

        assert response.status_code == 400

    def test_toggle(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        assert client.patch(f"{BASE}/{rule_id}").json()["is_active"] is False
        assert client.patch(f"{BASE}/{rule_id}", json={"is_active": True}).json()["is_active"] is True

    def test_list_filters(self, client, bureau_rule, approve_rule):
        client.post(BASE, json=bureau_rule)
        approve_id = client.post(BASE, json=approve_rule).json()["id"]
        client.patch(f"{BASE}/{approve_id}", json={"is_active": False})

        assert len(client.get(BASE).json()) == 2
        assert [r["name"] for r in client.get(BASE, params={"type": "risk"}).json()] == [
            "Strong bureau score"
        ]
        assert [r["name"] for r in client.get(BASE, params={"active": False}).json()] == [
            "Homeowner fast track"
        ]

    def test_list_in_priority_order(self, client, bureau_rule, approve_rule):
        client.post(BASE, json=approve_rule)
        client.post(BASE, json=bureau_rule)

        names = [r["name"] for r in client.get(BASE).json()]

        assert names == ["Strong bureau score", "Homeowner fast track"]

    def test_unknown_rule(self, client):
        assert client.get(f"{BASE}/{uuid.uuid4()}").status_code == 404
        assert client.delete(f"{BASE}/{uuid.uuid4()}").status_code == 404


class TestRuleExecution:
    """Dry-run execution of the active rules."""

    def test_execute(self, client, bureau_rule, strong_applicant):
        client.post(BASE, json=bureau_rule)

        response = client.post(f"{BASE}/execute", json={"applicant_data": strong_applicant})

        assert response.status_code == 200
        body = response.json()
        assert body["triggered_count"] == 1
        assert body["final_score_adjustment"] == 5
        assert body["results"][0]["rule_name"] == "Strong bureau score"

    def test_inactive_rules_are_skipped(self, client, bureau_rule, strong_applicant):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]
        client.patch(f"{BASE}/{rule_id}", json={"is_active": False})

        body = client.post(f"{BASE}/execute", json={"applicant_data": strong_applicant}).json()

        assert body["results"] == []
        assert body["final_score_adjustment"] is None

    def test_execution_is_not_recorded(self, client, bureau_rule, strong_applicant):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        client.post(f"{BASE}/execute", json={"applicant_data": strong_applicant})

        assert client.get(f"{BASE}/{rule_id}").json()["recent_executions"] == []
        assert client.delete(f"{BASE}/{rule_id}").status_code == 200

    def test_empty_record_rejected(self, client):
        response = client.post(f"{BASE}/execute", json={"applicant_data": {}})

        assert response.status_code == 400


class TestRuleDeletion:
    """Deleting rules that the audit trail references."""

    def test_delete_unused_rule(self, client, bureau_rule):
        rule_id = client.post(BASE, json=bureau_rule).json()["id"]

        response = client.delete(f"{BASE}/{rule_id}")

        assert response.status_code == 200
        assert response.json() == {"deleted": True, "rule_id": rule_id, "deleted_executions": 0}

    def test_delete_with_history_requires_cascade(self, seeded_client, bureau_rule, strong_applicant):
        rule_id = seeded_client.post(BASE, json=bureau_rule).json()["id"]
        assert seeded_client.post("/api/v1/predict", json=strong_applicant).status_code == 200

        refused = seeded_client.delete(f"{BASE}/{rule_id}")
        assert refused.status_code == 400
        assert refused.json()["error"] == "referential_constraint"
        assert seeded_client.get(f"{BASE}/{rule_id}").status_code == 200

        deleted = seeded_client.delete(f"{BASE}/{rule_id}", params={"cascade": True})
        assert deleted.status_code == 200
        assert deleted.json()["deleted_executions"] == 1
        assert seeded_client.get(f"{BASE}/{rule_id}").status_code == 404
