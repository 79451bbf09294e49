"""Helpdesk API Client - automation rules and custom fields over REST"""
from typing import Any, Dict, List, Optional
import httpx

from ..config.settings import settings
from ..domain.enums import CustomFieldEntityType
from ..domain.errors import HelpdeskApiError, HelpdeskUnavailableError, RuleNotFoundError
from ..domain.models import AutomationRule, CustomFieldDefinition
from ..utils.logger import get_logger, get_correlation_id

logger = get_logger(__name__)


class HelpdeskClient:
    """
    Async client for the helpdesk REST API

    The helpdesk owns persistence and rule execution; this client only
    reads and mutates rules and reads custom-field definitions. No retries
    are performed - failures are raised to the caller.
    """

    RULES_PATH = "/api/automation-rules"
    CUSTOM_FIELDS_PATH = "/api/custom-fields"

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        token = settings.helpdesk_api_token if token is None else token
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.helpdesk_api_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.helpdesk_api_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "HelpdeskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # =========================================================================
    # Automation rules
    # =========================================================================

    async def list_rules(self) -> List[AutomationRule]:
        """GET /api/automation-rules"""
        response = await self._request("GET", self.RULES_PATH)
        return [AutomationRule.model_validate(item) for item in response.json()]

    async def create_rule(self, payload: Dict[str, Any]) -> AutomationRule:
        """POST /api/automation-rules"""
        response = await self._request("POST", self.RULES_PATH, json=payload)
        rule = AutomationRule.model_validate(response.json())
        logger.info(
            f"Created automation rule {rule.id}",
            extra={"rule_id": rule.id, "rule_type": rule.rule_type, "trigger": rule.trigger}
        )
        return rule

    async def update_rule(self, rule_id: str, changes: Dict[str, Any]) -> AutomationRule:
        """PATCH /api/automation-rules/{id} with a partial body"""
        response = await self._request("PATCH", f"{self.RULES_PATH}/{rule_id}", json=changes)
        return AutomationRule.model_validate(response.json())

    async def delete_rule(self, rule_id: str) -> None:
        """DELETE /api/automation-rules/{id}"""
        await self._request("DELETE", f"{self.RULES_PATH}/{rule_id}")
        logger.info(f"Deleted automation rule {rule_id}", extra={"rule_id": rule_id})

    # =========================================================================
    # Custom fields
    # =========================================================================

    async def list_custom_fields(
        self, entity_type: CustomFieldEntityType = CustomFieldEntityType.TICKET
    ) -> List[CustomFieldDefinition]:
        """GET /api/custom-fields?entityType=<entity_type>"""
        response = await self._request(
            "GET", self.CUSTOM_FIELDS_PATH, params={"entityType": CustomFieldEntityType(entity_type).value}
        )
        return [CustomFieldDefinition.model_validate(item) for item in response.json()]

    # =========================================================================
    # Transport
    # =========================================================================

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        headers = {}
        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-Id"] = correlation_id

        try:
            response = await self._client.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"Helpdesk API {method} {path} failed: {e}")
            raise HelpdeskUnavailableError(
                f"Helpdesk API is unreachable: {e}",
                details={"method": method, "path": path}
            ) from e

        if response.status_code == 404 and path.startswith(f"{self.RULES_PATH}/"):
            raise RuleNotFoundError(
                f"Automation rule {path.rsplit('/', 1)[-1]} not found",
                details={"rule_id": path.rsplit("/", 1)[-1]}
            )

        if response.is_error:
            message = self._error_message(response)
            logger.error(
                f"Helpdesk API error: {response.status_code} - {message}",
                extra={"status_code": response.status_code}
            )
            raise HelpdeskApiError(message, status_code=response.status_code)

        return response

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"Helpdesk API error {response.status_code}"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, str):
            return error
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, list) and error:
            # Schema failures arrive as a list of {path, message} issues
            return "; ".join(HelpdeskClient._issue_message(issue) for issue in error)
        return f"Helpdesk API error {response.status_code}"

    @staticmethod
    def _issue_message(issue: Any) -> str:
        if not isinstance(issue, dict):
            return str(issue)
        message = str(issue.get("message", "Invalid value"))
        path = ".".join(str(part) for part in issue.get("path") or [])
        return f"{path}: {message}" if path else message
