"""Approval flow resolver: assembles FlowView and answers approver questions.

Loads the flow definition (company scope first, global fallback), the
subject's recorded approval state, and resolves every role specifier into a
displayable approver with a projected status. Store problems never escape:
each read is bounded by a timeout and degrades to a documented fallback.
"""

from __future__ import annotations

import asyncio

from hse_approvals.application.dtos.approval_flow import (
    ApproverActions,
    FlowView,
    ResolvedApprover,
    ResolvedLevel,
)
from hse_approvals.application.interfaces.repositories import IApprovalDataSource
from hse_approvals.application.services.approver_status import (
    derive_level_status,
    project_approver_status,
)
from hse_approvals.application.services.guarded_lookup import LookupGuard
from hse_approvals.application.services.level_gate import level_gate_open
from hse_approvals.application.services.role_specifier_resolver import (
    ResolutionContext,
    RoleSpecifierResolver,
)
from hse_approvals.domain.entities import (
    ApprovalState,
    ApprovalSubject,
    FlowDefinition,
    FlowLevel,
)
from hse_approvals.domain.enums import FlowScope
from hse_approvals.domain.value_objects import FunctionSpecifier, HierarchySpecifier
from hse_approvals.shared.telemetry.logging import get_logger
from hse_approvals.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)

VIEW_NOT_CONFIGURED = "Not Configured"
VIEW_DISABLED = "Approval Disabled"
VIEW_ERROR = "Error"
VIEW_NO_COMPANY = "No Company Context"

SUBJECT_ACTIONS = ("approve", "decline", "edit", "export")

_READ_FAILED = object()


def view_type(definition: FlowDefinition, scope: FlowScope) -> str:
    """Display label, e.g. "Sequential Approval (Company Scope)"."""
    order = "Sequential" if definition.is_sequential else "Parallel"
    return f"{order} Approval ({scope.value.title()} Scope)"


class ApprovalFlowResolver:
    """Read-only resolver over an IApprovalDataSource. Stateless between calls."""

    def __init__(
        self, data_source: IApprovalDataSource, *, read_timeout: float = 5.0
    ) -> None:
        self.data_source = data_source
        self.read_timeout = read_timeout

    @traced("approval_flow.build_view")
    async def build_approval_view(
        self,
        process_type: str,
        subject: ApprovalSubject,
        company_id: str | None,
    ) -> FlowView:
        """Resolve the full flow for a subject. Never raises on store failures."""
        add_span_attributes(process_type=process_type, subject_id=subject.id)
        if not company_id:
            logger.info(
                "No company context for %s subject %s; flow not resolved",
                process_type,
                subject.id,
            )
            return FlowView(
                type=VIEW_NO_COMPANY,
                approval_order=None,
                company_id=None,
                process_type=process_type,
            )

        guard = LookupGuard(self.read_timeout)
        loaded = await self._load_definition(guard, process_type, company_id)
        if loaded is _READ_FAILED:
            return FlowView(
                type=VIEW_ERROR,
                approval_order=None,
                company_id=company_id,
                process_type=process_type,
                degraded_lookups=guard.degraded,
            )
        definition, scope = loaded
        if definition is None:
            return FlowView(
                type=VIEW_NOT_CONFIGURED,
                approval_order=None,
                company_id=company_id,
                process_type=process_type,
            )
        if not definition.enabled:
            return FlowView(
                type=VIEW_DISABLED,
                approval_order=definition.approval_order,
                company_id=company_id,
                process_type=process_type,
                scope=scope,
            )

        state = await guard.run(
            "approval_state",
            lambda: self.data_source.get_approval_state(
                subject.id, process_type=process_type
            ),
            ApprovalState(),
        )
        specifiers = RoleSpecifierResolver(self.data_source, guard)
        context = ResolutionContext(subject=subject, company_id=company_id)
        levels = await asyncio.gather(
            *(
                self._resolve_level(definition, level, state, specifiers, context)
                for level in definition.levels
            )
        )
        return FlowView(
            type=view_type(definition, scope),
            approval_order=definition.approval_order,
            company_id=company_id,
            process_type=process_type,
            scope=scope,
            levels=tuple(levels),
            degraded_lookups=guard.degraded,
        )

    @traced("approval_flow.is_user_approver")
    async def is_user_approver(
        self,
        acting_user_id: str,
        process_type: str,
        subject: ApprovalSubject,
        *,
        company_id: str | None = None,
    ) -> bool:
        """True iff the user may act on some open, actionable level right now."""
        level = await self._find_actionable_level(
            acting_user_id, process_type, subject, company_id
        )
        return level is not None

    async def resolve_actions(
        self,
        acting_user_id: str,
        process_type: str,
        subject: ApprovalSubject,
        *,
        company_id: str | None = None,
    ) -> ApproverActions:
        """Which subject actions the acting user should be offered.

        Actions stay hidden once the subject itself is approved or declined.
        """
        level = await self._find_actionable_level(
            acting_user_id, process_type, subject, company_id
        )
        if level is None:
            return ApproverActions(is_approver=False, level_name=None, actions=())
        return ApproverActions(
            is_approver=True,
            level_name=level.name,
            actions=() if subject.is_closed else SUBJECT_ACTIONS,
        )

    async def _find_actionable_level(
        self,
        acting_user_id: str,
        process_type: str,
        subject: ApprovalSubject,
        company_id: str | None,
    ) -> FlowLevel | None:
        if not acting_user_id:
            return None
        guard = LookupGuard(self.read_timeout)
        if company_id:
            loaded = await self._load_definition(guard, process_type, company_id)
        else:
            loaded = await self._load_global_definition(guard, process_type)
        if loaded is _READ_FAILED:
            logger.debug("Approver check for %s denied: flow unreadable", acting_user_id)
            return None
        definition, _ = loaded
        if definition is None or not definition.enabled:
            logger.debug(
                "Approver check for %s denied: no enabled %s flow",
                acting_user_id,
                process_type,
            )
            return None

        state = await guard.run(
            "approval_state",
            lambda: self.data_source.get_approval_state(
                subject.id, process_type=process_type
            ),
            _READ_FAILED,
        )
        if state is _READ_FAILED:
            logger.debug(
                "Approver check for %s denied: approval state unreadable", acting_user_id
            )
            return None

        candidates = [
            level
            for level in definition.levels
            if not state.is_level_completed(level.key)
            and level_gate_open(definition, level, state)
        ]
        if not candidates:
            logger.debug("Approver check for %s denied: no open level", acting_user_id)
            return None

        specifiers = [s for level in candidates for s in level.specifiers]
        specifiers_resolver = RoleSpecifierResolver(self.data_source, guard)
        context = await specifiers_resolver.build_context(
            subject,
            company_id=company_id,
            acting_user_id=acting_user_id,
            load_acting_user=any(isinstance(s, FunctionSpecifier) for s in specifiers),
            load_hierarchy=any(isinstance(s, HierarchySpecifier) for s in specifiers),
        )
        for level in candidates:
            if any(specifiers_resolver.matches(s, context) for s in level.specifiers):
                return level
        logger.debug(
            "Approver check for %s denied: no matching specifier on %s",
            acting_user_id,
            subject.id,
        )
        return None

    async def _load_definition(
        self, guard: LookupGuard, process_type: str, company_id: str
    ) -> tuple[FlowDefinition | None, FlowScope] | object:
        """Company definition, else global. A failed read is not a miss."""
        company = await guard.run(
            "flow_definition.company",
            lambda: self.data_source.get_flow_definition(
                FlowScope.COMPANY, company_id, process_type
            ),
            _READ_FAILED,
        )
        if company is _READ_FAILED:
            return _READ_FAILED
        if company is not None:
            return company, FlowScope.COMPANY
        logger.info(
            "No company %s flow for %s; using global definition",
            process_type,
            company_id,
        )
        return await self._load_global_definition(guard, process_type)

    async def _load_global_definition(
        self, guard: LookupGuard, process_type: str
    ) -> tuple[FlowDefinition | None, FlowScope] | object:
        definition = await guard.run(
            "flow_definition.global",
            lambda: self.data_source.get_flow_definition(
                FlowScope.GLOBAL, None, process_type
            ),
            _READ_FAILED,
        )
        if definition is _READ_FAILED:
            return _READ_FAILED
        if definition is None:
            return None, FlowScope.NONE
        return definition, FlowScope.GLOBAL

    async def _resolve_level(
        self,
        definition: FlowDefinition,
        level: FlowLevel,
        state: ApprovalState,
        specifiers: RoleSpecifierResolver,
        context: ResolutionContext,
    ) -> ResolvedLevel:
        level_state = state.for_level(level.key)
        gate_open = level_gate_open(definition, level, state)
        resolutions = await asyncio.gather(
            *(specifiers.resolve(s, context) for s in level.specifiers)
        )

        approvers = []
        for specifier, resolution in zip(level.specifiers, resolutions):
            action = level_state.action_for(specifier) if level_state else None
            approvers.append(
                ResolvedApprover(
                    name=resolution.identity.name,
                    title=resolution.identity.title,
                    department=resolution.identity.department,
                    status=project_approver_status(
                        action,
                        level_state,
                        level_number=level.number,
                        approval_order=definition.approval_order,
                        gate_open=gate_open,
                    ),
                    date=action.approved_at if action else None,
                    comments=action.comments if action else "",
                    role=resolution.identity.role,
                    specifier_value=specifier.value,
                    resolved_user_id=resolution.resolved_user_id,
                )
            )

        total = len(level.specifiers)
        return ResolvedLevel(
            name=level.name,
            level_number=level.number,
            status=derive_level_status(
                level_state,
                total_approvers=total,
                approval_order=definition.approval_order,
                gate_open=gate_open,
            ),
            total_approvers=total,
            approved_count=level_state.approved_count if level_state else 0,
            rejected_count=level_state.rejected_count if level_state else 0,
            approvers=tuple(approvers),
            comments=level_state.comments if level_state else "",
            assignment_types=tuple(
                dict.fromkeys(s.assignment_type for s in level.specifiers)
            ),
        )
