"""Automation API Routes - rule list, vocabulary and rule form sessions"""
from typing import Optional, Tuple
from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import BaseModel, Field

from ..deps import get_automation_service_dep, get_correlation_id_dep
from ...domain.enums import ConditionMatch, RuleType
from ...domain.models import AutomationRule, Option, ValueEditor
from ...forms import RuleFormView
from ...services import AutomationService
from ...utils.logger import get_logger
from ...views import RuleSummary
from ...vocabulary import Vocabulary, operators_for, value_editor_for

logger = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Request/Response Models
# ============================================================================

class OpenFormRequest(BaseModel):
    """Request to open a rule form"""
    rule_type: RuleType = RuleType.TICKET_CREATION


class RuleTypeRequest(BaseModel):
    """Request to change the draft's rule type"""
    rule_type: RuleType


class FormDetailsRequest(BaseModel):
    """Rule-level inputs; omitted fields are left unchanged"""
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    trigger: Optional[str] = None
    condition_match: Optional[ConditionMatch] = None


class ConditionRowRequest(BaseModel):
    """Edit of a condition row, applied field -> operator -> value"""
    field: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[str] = Field(None, max_length=2000)


class ActionRowRequest(BaseModel):
    """Edit of an action row, applied type -> value"""
    type: Optional[str] = None
    value: Optional[str] = Field(None, max_length=5000)


class ToggleRuleRequest(BaseModel):
    """Request to activate or deactivate a rule"""
    is_active: bool


class OperatorsResponse(BaseModel):
    """Operators and editor for one condition field"""
    field: str
    operators: Tuple[Option, ...]
    editor: Optional[ValueEditor] = None


# ============================================================================
# Vocabulary
# ============================================================================

@router.get("/vocabulary", response_model=Vocabulary)
async def get_vocabulary(
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Merged triggers, condition fields, operators and action types"""
    return await service.get_vocabulary()


@router.post("/vocabulary/refresh", response_model=Vocabulary)
async def refresh_vocabulary(
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Refetch custom fields and merge again"""
    return await service.refresh_vocabulary()


@router.get("/vocabulary/operators", response_model=OperatorsResponse)
async def get_operators(
    field: str = Query(..., description="Condition field key, e.g. priority or cf_42"),
    operator: Optional[str] = Query(None, description="Selected operator, to resolve the editor"),
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Operators valid for a field and the value editor to render"""
    vocabulary = await service.get_vocabulary()
    operators = operators_for(field, vocabulary)
    return OperatorsResponse(
        field=field,
        operators=operators,
        editor=value_editor_for(field, vocabulary, operator or operators[0].value),
    )


# ============================================================================
# Rule form sessions (MUST be before /{rule_id} routes)
# ============================================================================

@router.post("/forms", response_model=RuleFormView, status_code=status.HTTP_201_CREATED)
async def open_form(
    request: OpenFormRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Open a rule form with a fresh draft"""
    session = await service.open_form(request.rule_type)
    return session.view()


@router.get("/forms/{session_id}", response_model=RuleFormView)
async def get_form(
    session_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Current draft, resolved rows and errors"""
    return service.get_form(session_id).view()


@router.delete("/forms/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_form(
    session_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Close the form and discard the draft"""
    service.close_form(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/forms/{session_id}/rule-type", response_model=RuleFormView)
async def set_rule_type(
    session_id: str,
    request: RuleTypeRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Change rule type; the trigger resets to the type's first entry"""
    session = service.get_form(session_id)
    session.set_rule_type(request.rule_type)
    return session.view()


@router.put("/forms/{session_id}/details", response_model=RuleFormView)
async def set_details(
    session_id: str,
    request: FormDetailsRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Update name, description, trigger or condition match"""
    session = service.get_form(session_id)
    session.set_details(
        name=request.name,
        description=request.description,
        trigger=request.trigger,
        condition_match=request.condition_match,
    )
    return session.view()


@router.post("/forms/{session_id}/conditions", response_model=RuleFormView)
async def add_condition(
    session_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Append a condition row"""
    session = service.get_form(session_id)
    session.add_condition()
    return session.view()


@router.patch("/forms/{session_id}/conditions/{index}", response_model=RuleFormView)
async def edit_condition(
    session_id: str,
    index: int,
    request: ConditionRowRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Change a condition row's field, operator or value"""
    session = service.get_form(session_id)
    session.edit_condition(index, field=request.field, operator=request.operator, value=request.value)
    return session.view()


@router.delete("/forms/{session_id}/conditions/{index}", response_model=RuleFormView)
async def remove_condition(
    session_id: str,
    index: int,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Remove a condition row"""
    session = service.get_form(session_id)
    session.remove_condition(index)
    return session.view()


@router.post("/forms/{session_id}/actions", response_model=RuleFormView)
async def add_action(
    session_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Append an action row"""
    session = service.get_form(session_id)
    session.add_action()
    return session.view()


@router.patch("/forms/{session_id}/actions/{index}", response_model=RuleFormView)
async def edit_action(
    session_id: str,
    index: int,
    request: ActionRowRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Change an action row's type or value"""
    session = service.get_form(session_id)
    session.edit_action(index, action_type=request.type, value=request.value)
    return session.view()


@router.delete("/forms/{session_id}/actions/{index}", response_model=RuleFormView)
async def remove_action(
    session_id: str,
    index: int,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Remove an action row"""
    session = service.get_form(session_id)
    session.remove_action(index)
    return session.view()


@router.post("/forms/{session_id}/submit", response_model=RuleFormView)
async def submit_form(
    session_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """
    Validate and create the rule.

    Validation errors return 422 without calling the helpdesk; helpdesk
    failures return 502/503 and the draft stays open for a retry.
    """
    session = await service.submit_form(session_id)
    logger.info(
        f"Rule form {session_id} submitted",
        extra={"session_id": session_id, "rule_id": session.created_rule.id}
    )
    view = session.view()
    service.sessions.remove(session_id)
    return view


# ============================================================================
# Rules
# ============================================================================

@router.get("", response_model=RuleSummary)
async def get_rules_summary(
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Rules grouped by type with totals"""
    return await service.get_summary()


@router.patch("/{rule_id}/active", response_model=AutomationRule)
async def toggle_rule(
    rule_id: str,
    request: ToggleRuleRequest,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Activate or deactivate a rule; returns the server-confirmed rule"""
    return await service.toggle_rule(rule_id, request.is_active)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_rule(
    rule_id: str,
    service: AutomationService = Depends(get_automation_service_dep),
    correlation_id: str = Depends(get_correlation_id_dep)
):
    """Delete a rule"""
    await service.delete_rule(rule_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
