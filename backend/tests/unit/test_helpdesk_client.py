"""Helpdesk REST client against a MockTransport"""

import json

import httpx
import pytest

from helpdesk_console.clients import HelpdeskClient
from helpdesk_console.domain.errors import HelpdeskApiError, HelpdeskUnavailableError, RuleNotFoundError
from helpdesk_console.utils.logger import set_correlation_id


class TestRules:
    async def test_list_rules(self, helpdesk, helpdesk_client):
        helpdesk.add_rule(name="Auto-assign billing", executionCount=4)
        rules = await helpdesk_client.list_rules()

        assert len(rules) == 1
        assert rules[0].name == "Auto-assign billing"
        assert rules[0].execution_count == 4
        assert rules[0].rule_type == "ticket_creation"

    async def test_create_rule_posts_payload(self, helpdesk, helpdesk_client):
        payload = {
            "name": "Escalate urgent",
            "ruleType": "ticket_update",
            "trigger": "priority_changed",
            "conditionMatch": "all",
            "conditions": [{"field": "priority", "operator": "is", "value": "urgent"}],
            "actions": [{"type": "set_status", "value": "pending"}],
        }
        rule = await helpdesk_client.create_rule(payload)

        assert rule.id == "1"
        assert rule.rule_type == "ticket_update"
        posted = helpdesk.calls("POST")
        assert len(posted) == 1
        assert posted[0].headers["Authorization"] == "Bearer test-token"

    async def test_update_rule_sends_partial_body(self, helpdesk, helpdesk_client):
        helpdesk.add_rule()
        rule = await helpdesk_client.update_rule("1", {"isActive": False})

        assert rule.is_active is False
        assert json.loads(helpdesk.calls("PATCH")[0].content) == {"isActive": False}

    async def test_delete_rule(self, helpdesk, helpdesk_client):
        helpdesk.add_rule()
        await helpdesk_client.delete_rule("1")
        assert helpdesk.rules == []

    async def test_missing_rule_raises_not_found(self, helpdesk_client):
        with pytest.raises(RuleNotFoundError) as exc_info:
            await helpdesk_client.update_rule("404", {"isActive": True})
        assert exc_info.value.details == {"rule_id": "404"}


class TestCustomFields:
    async def test_list_filters_by_entity_type(self, helpdesk, helpdesk_client):
        helpdesk.custom_fields.append({
            "id": "77", "entityType": "contact", "label": "Tier", "fieldType": "text",
        })
        fields = await helpdesk_client.list_custom_fields("ticket")

        assert [f.id for f in fields] == ["42"]
        assert fields[0].field_type == "number"
        request = helpdesk.calls("GET", "/api/custom-fields")[0]
        assert request.url.params["entityType"] == "ticket"

    async def test_null_options_tolerated(self, helpdesk, helpdesk_client):
        helpdesk.custom_fields = [{
            "id": "3", "entityType": "ticket", "label": "Notes", "fieldType": "textarea", "options": None,
        }]
        fields = await helpdesk_client.list_custom_fields()
        assert fields[0].options == []


class TestErrors:
    async def test_server_error_message_surfaced(self, helpdesk, helpdesk_client):
        helpdesk.fail_with = 500
        with pytest.raises(HelpdeskApiError) as exc_info:
            await helpdesk_client.create_rule({"name": "x"})

        assert exc_info.value.message == "Failed to process request"
        assert exc_info.value.status_code == 500
        assert exc_info.value.details["upstream_status"] == 500

    async def test_non_json_error_body(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))
        async with HelpdeskClient(base_url="http://helpdesk.test", token="", transport=transport) as client:
            with pytest.raises(HelpdeskApiError) as exc_info:
                await client.list_rules()
        assert exc_info.value.message == "Bad Gateway"

    async def test_schema_issue_list_surfaced(self):
        issues = [
            {"path": ["name"], "message": "String must contain at least 2 character(s)"},
            {"path": ["actions", 0, "type"], "message": "Required"},
            {"message": "Invalid rule"},
        ]
        transport = httpx.MockTransport(lambda request: httpx.Response(400, json={"error": issues}))
        async with HelpdeskClient(base_url="http://helpdesk.test", token="", transport=transport) as client:
            with pytest.raises(HelpdeskApiError) as exc_info:
                await client.create_rule({"name": "x"})

        assert exc_info.value.message == (
            "name: String must contain at least 2 character(s); actions.0.type: Required; Invalid rule"
        )
        assert exc_info.value.status_code == 400

    async def test_connection_failure_is_unavailable(self):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = HelpdeskClient(base_url="http://helpdesk.test", transport=httpx.MockTransport(refuse))
        with pytest.raises(HelpdeskUnavailableError) as exc_info:
            await client.list_custom_fields()
        assert exc_info.value.http_status == 503
        await client.aclose()


class TestHeaders:
    async def test_correlation_id_forwarded(self, helpdesk, helpdesk_client):
        set_correlation_id("COR-test-1")
        try:
            await helpdesk_client.list_rules()
        finally:
            set_correlation_id("")
        assert helpdesk.requests[-1].headers["X-Correlation-Id"] == "COR-test-1"

    async def test_no_auth_header_without_token(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=[])

        async with HelpdeskClient(base_url="http://helpdesk.test", token="", transport=httpx.MockTransport(handler)) as client:
            await client.list_rules()
        assert "Authorization" not in seen[0].headers
