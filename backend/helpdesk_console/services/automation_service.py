"""Automation Service - rule builder orchestration over the helpdesk API"""
import asyncio
from typing import List, Optional, Union

from ..clients import HelpdeskClient
from ..config.settings import settings
from ..domain.enums import CustomFieldEntityType, RuleType
from ..domain.errors import DomainError
from ..domain.models import AutomationRule, CustomFieldDefinition
from ..forms import RuleFormSession
from ..repositories.form_session_repo import FormSessionRepository
from ..utils.logger import get_logger
from ..views import RuleSummary, summarize_rules
from ..vocabulary import Vocabulary, VocabularyBuilder
from .query_cache import QueryCache, RULES_QUERY, custom_fields_query

logger = get_logger(__name__)


class AutomationService:
    """
    Service for the automation page

    Holds the query cache, the merged vocabulary and the open form
    sessions. Every mutation waits for the helpdesk's answer and only then
    invalidates the cached rule list; nothing is applied optimistically.
    """

    def __init__(
        self,
        client: HelpdeskClient,
        cache: Optional[QueryCache] = None,
        sessions: Optional[FormSessionRepository] = None,
        builder: Optional[VocabularyBuilder] = None,
        entity_type: Union[CustomFieldEntityType, str, None] = None,
    ):
        self.client = client
        self.cache = cache or QueryCache()
        self.sessions = sessions or FormSessionRepository()
        self.builder = builder or VocabularyBuilder()
        self.entity_type = CustomFieldEntityType(entity_type or settings.custom_field_entity_type)
        self._vocabulary: Optional[Vocabulary] = None
        self._vocabulary_source: Optional[List[CustomFieldDefinition]] = None

    # =========================================================================
    # Vocabulary
    # =========================================================================

    async def get_custom_fields(self) -> List[CustomFieldDefinition]:
        return await self.cache.get_or_fetch(
            custom_fields_query(self.entity_type),
            lambda: self.client.list_custom_fields(self.entity_type),
        )

    async def get_vocabulary(self) -> Vocabulary:
        """Merged vocabulary, rebuilt only when the custom-field list changed"""
        custom_fields = await self.get_custom_fields()
        if self._vocabulary is None or custom_fields != self._vocabulary_source:
            self._vocabulary = self.builder.build(custom_fields)
            self._vocabulary_source = list(custom_fields)
            logger.info(
                "Rule builder vocabulary rebuilt",
                extra={"custom_field_count": len(custom_fields)}
            )
            for session in self.sessions.list_open():
                session.refresh_vocabulary(self._vocabulary)
        return self._vocabulary

    async def refresh_vocabulary(self) -> Vocabulary:
        """Drop cached custom fields and merge again"""
        self.cache.invalidate(custom_fields_query(self.entity_type))
        return await self.get_vocabulary()

    # =========================================================================
    # Rule list
    # =========================================================================

    async def get_rules(self) -> List[AutomationRule]:
        return await self.cache.get_or_fetch(RULES_QUERY, self.client.list_rules)

    async def get_summary(self) -> RuleSummary:
        rules = await self.get_rules()
        vocabulary = await self.get_vocabulary()
        return summarize_rules(rules, vocabulary)

    async def toggle_rule(self, rule_id: str, is_active: bool) -> AutomationRule:
        """Flip isActive; the new state is whatever the server confirms"""
        rule = await self.client.update_rule(rule_id, {"isActive": is_active})
        self.cache.invalidate(RULES_QUERY)
        logger.info(
            f"Rule {rule_id} is now {'active' if rule.is_active else 'inactive'}",
            extra={"rule_id": rule_id}
        )
        return rule

    async def delete_rule(self, rule_id: str) -> None:
        await self.client.delete_rule(rule_id)
        self.cache.invalidate(RULES_QUERY)

    # =========================================================================
    # Rule form
    # =========================================================================

    async def open_form(self, rule_type: RuleType = RuleType.TICKET_CREATION) -> RuleFormSession:
        vocabulary = await self.get_vocabulary()
        session = RuleFormSession(vocabulary)
        session.open(rule_type)
        return self.sessions.add(session)

    def get_form(self, session_id: str) -> RuleFormSession:
        return self.sessions.get_or_raise(session_id)

    def close_form(self, session_id: str) -> None:
        """Discard a draft without calling the helpdesk"""
        session = self.sessions.get_or_raise(session_id)
        session.close()
        self.sessions.remove(session_id)

    async def submit_form(self, session_id: str) -> RuleFormSession:
        """
        Validate the draft and create the rule

        Raises:
            RuleValidationError: draft invalid, nothing was sent
            DomainError: helpdesk rejected or failed the call; the draft is
                kept for a manual retry
        """
        session = self.sessions.get_or_raise(session_id)
        payload = session.begin_submit()

        try:
            rule = await self.client.create_rule(payload)
        except DomainError as e:
            session.fail_submit(e.message)
            raise
        except asyncio.CancelledError:
            # The request went away mid-call; the draft must stay editable
            session.fail_submit("Rule creation was cancelled before the helpdesk answered")
            raise
        except Exception:
            session.fail_submit("Unexpected error while creating the rule")
            raise

        session.complete_submit(rule)
        self.cache.invalidate(RULES_QUERY)
        return session
