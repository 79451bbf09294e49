"""
Pytest Configuration and Fixtures

Shared fixtures: a fake helpdesk REST API served through
httpx.MockTransport, custom-field definitions and vocabularies.
"""

import json
import os
import tempfile
from typing import Any, Dict, List, Optional

os.environ.setdefault("LOGS_PATH", os.path.join(tempfile.gettempdir(), "helpdesk-console-test-logs"))

import httpx
import pytest

from helpdesk_console.clients import HelpdeskClient
from helpdesk_console.domain.models import CustomFieldDefinition
from helpdesk_console.repositories import FormSessionRepository
from helpdesk_console.services import AutomationService
from helpdesk_console.vocabulary import VocabularyBuilder


class FakeHelpdesk:
    """In-memory stand-in for the helpdesk automation/custom-field endpoints"""

    def __init__(self):
        self.rules: List[Dict[str, Any]] = []
        self.custom_fields: List[Dict[str, Any]] = []
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[int] = None
        self._next_id = 1

    def add_rule(self, **fields: Any) -> Dict[str, Any]:
        rule = {
            "id": str(self._next_id),
            "name": "Rule",
            "description": None,
            "ruleType": "ticket_creation",
            "trigger": "on_create",
            "conditionMatch": "all",
            "conditions": [],
            "actions": [{"type": "set_status", "value": "open"}],
            "isActive": True,
            "order": 0,
            "executionCount": 0,
            "lastExecutedAt": None,
            "createdAt": "2026-01-05T10:00:00Z",
        }
        rule.update(fields)
        self._next_id += 1
        self.rules.append(rule)
        return rule

    def calls(self, method: str, path_prefix: str = "/api/automation-rules") -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.startswith(path_prefix)
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"error": "Failed to process request"})

        path = request.url.path
        if path == "/api/custom-fields" and request.method == "GET":
            entity_type = request.url.params.get("entityType")
            return httpx.Response(200, json=[
                cf for cf in self.custom_fields
                if entity_type is None or cf.get("entityType", "ticket") == entity_type
            ])

        if path == "/api/automation-rules":
            if request.method == "GET":
                return httpx.Response(200, json=self.rules)
            if request.method == "POST":
                body = json.loads(request.content)
                rule = self.add_rule(**body)
                return httpx.Response(201, json=rule)

        if path.startswith("/api/automation-rules/"):
            rule_id = path.rsplit("/", 1)[-1]
            rule = next((r for r in self.rules if r["id"] == rule_id), None)
            if rule is None:
                return httpx.Response(404, json={"error": "Automation rule not found"})
            if request.method == "PATCH":
                rule.update(json.loads(request.content))
                return httpx.Response(200, json=rule)
            if request.method == "DELETE":
                self.rules.remove(rule)
                return httpx.Response(204)

        return httpx.Response(404, json={"error": "Not found"})


def make_custom_field(id: str, label: str, field_type: str, **extra: Any) -> Dict[str, Any]:
    data = {
        "id": id,
        "entityType": "ticket",
        "name": label.lower().replace(" ", "_"),
        "label": label,
        "fieldType": field_type,
        "options": [],
        "isRequired": False,
        "isActive": True,
        "isArchived": False,
        "placeholder": None,
        "helpText": None,
        "position": 0,
    }
    data.update(extra)
    return data


@pytest.fixture
def priority_score_field() -> CustomFieldDefinition:
    return CustomFieldDefinition.model_validate(make_custom_field("42", "Priority Score", "number"))


@pytest.fixture
def custom_fields(priority_score_field) -> List[CustomFieldDefinition]:
    return [
        priority_score_field,
        CustomFieldDefinition.model_validate(
            make_custom_field("7", "Region", "dropdown", options=["EMEA", "APAC", "AMER"])
        ),
        CustomFieldDefinition.model_validate(make_custom_field("9", "VIP", "checkbox")),
        CustomFieldDefinition.model_validate(make_custom_field("11", "Renewal Date", "date")),
    ]


@pytest.fixture
def vocabulary(custom_fields):
    return VocabularyBuilder().build(custom_fields)


@pytest.fixture
def base_vocabulary():
    return VocabularyBuilder().build([])


@pytest.fixture
def helpdesk() -> FakeHelpdesk:
    fake = FakeHelpdesk()
    fake.custom_fields = [make_custom_field("42", "Priority Score", "number")]
    return fake


@pytest.fixture
def helpdesk_client(helpdesk) -> HelpdeskClient:
    return HelpdeskClient(
        base_url="http://helpdesk.test",
        token="test-token",
        transport=httpx.MockTransport(helpdesk.handler),
    )


@pytest.fixture
def service(helpdesk_client) -> AutomationService:
    return AutomationService(helpdesk_client, sessions=FormSessionRepository(limit=10), entity_type="ticket")
