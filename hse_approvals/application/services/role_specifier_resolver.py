"""Role specifier resolution: who a specifier is, and whether it is the acting user.

Matching rules by variant:
- user: the acting user's id equals the specifier's user id.
- function: the acting user's job title equals the function id (case-insensitive).
- L+N: acting user and subject creator share a department and the acting
  user's position level is exactly N above the creator's. Any missing piece
  (creator, their record, department or level, or the acting user's level)
  means no match.
- unknown: never matches.
"""

from __future__ import annotations

from dataclasses import dataclass

from hse_approvals.application.dtos.approval_flow import (
    ApproverIdentity,
    SpecifierResolution,
)
from hse_approvals.application.interfaces.repositories import IApprovalDataSource
from hse_approvals.application.services.guarded_lookup import LookupGuard
from hse_approvals.domain.entities import ApprovalSubject, DirectoryUser
from hse_approvals.domain.value_objects import (
    FunctionSpecifier,
    HierarchySpecifier,
    RoleSpecifier,
    UnknownSpecifier,
    UserSpecifier,
)
from hse_approvals.shared.utils.text import humanize_identifier

NOT_ASSIGNED = "Not assigned"


@dataclass(frozen=True)
class ResolutionContext:
    """Everything matching needs, loaded once per resolution call."""

    subject: ApprovalSubject
    company_id: str | None = None
    acting_user_id: str | None = None
    acting_user: DirectoryUser | None = None
    acting_user_level: int | None = None
    creator: DirectoryUser | None = None
    creator_department: str | None = None
    creator_level: int | None = None


class RoleSpecifierResolver:
    """Resolves specifiers through the data source; all reads are guarded."""

    def __init__(self, data_source: IApprovalDataSource, guard: LookupGuard) -> None:
        self.data_source = data_source
        self.guard = guard

    async def build_context(
        self,
        subject: ApprovalSubject,
        *,
        company_id: str | None = None,
        acting_user_id: str | None = None,
        load_acting_user: bool = False,
        load_hierarchy: bool = False,
    ) -> ResolutionContext:
        """Load the acting user and the creator's placement as far as needed."""
        acting_user = None
        acting_user_level = None
        if acting_user_id and (load_acting_user or load_hierarchy):
            acting_user = await self._directory_user(acting_user_id, company_id)
            if load_hierarchy and acting_user is not None and acting_user.position:
                acting_user_level = await self._position_level(acting_user.position)

        creator = None
        creator_department = None
        creator_level = None
        if load_hierarchy and subject.creator_id:
            if subject.creator_id == acting_user_id and acting_user is not None:
                creator = acting_user
            else:
                creator = await self._directory_user(subject.creator_id, company_id)
            if creator is not None:
                creator_department = creator.department
                if creator.position:
                    creator_level = await self._position_level(creator.position)

        return ResolutionContext(
            subject=subject,
            company_id=company_id,
            acting_user_id=acting_user_id,
            acting_user=acting_user,
            acting_user_level=acting_user_level,
            creator=creator,
            creator_department=creator_department,
            creator_level=creator_level,
        )

    def matches(self, specifier: RoleSpecifier, context: ResolutionContext) -> bool:
        """Whether the acting user in context satisfies the specifier."""
        if not context.acting_user_id:
            return False
        if isinstance(specifier, UserSpecifier):
            return specifier.user_id == context.acting_user_id
        if isinstance(specifier, FunctionSpecifier):
            return context.acting_user is not None and context.acting_user.has_job_title(
                specifier.function_id
            )
        if isinstance(specifier, HierarchySpecifier):
            return self._matches_hierarchy(specifier, context)
        return False

    async def resolve(
        self, specifier: RoleSpecifier, context: ResolutionContext
    ) -> SpecifierResolution:
        """Display identity for the specifier plus the acting-user match."""
        resolved_user_id = None
        if isinstance(specifier, UserSpecifier):
            identity = await self._user_identity(specifier, context)
            resolved_user_id = specifier.user_id
        elif isinstance(specifier, FunctionSpecifier):
            identity = await self._function_identity(specifier, context)
        elif isinstance(specifier, HierarchySpecifier):
            identity = ApproverIdentity(
                name=f"Level +{specifier.levels_above} Approver",
                title="Hierarchical Approval",
                department="Company Hierarchy",
                role=f"L+{specifier.levels_above} Approver",
            )
        else:
            identity = self._unknown_identity(specifier)
        return SpecifierResolution(
            matches_acting_user=self.matches(specifier, context),
            identity=identity,
            resolved_user_id=resolved_user_id,
        )

    def _matches_hierarchy(
        self, specifier: HierarchySpecifier, context: ResolutionContext
    ) -> bool:
        acting = context.acting_user
        if (
            acting is None
            or context.creator is None
            or not context.creator_department
            or not acting.department
            or context.creator_level is None
            or context.acting_user_level is None
        ):
            return False
        if acting.department != context.creator_department:
            return False
        return context.acting_user_level - context.creator_level == specifier.levels_above

    async def _user_identity(
        self, specifier: UserSpecifier, context: ResolutionContext
    ) -> ApproverIdentity:
        if context.acting_user is not None and context.acting_user.id == specifier.user_id:
            user = context.acting_user
        else:
            user = await self._directory_user(specifier.user_id, context.company_id)
        if user is None:
            return ApproverIdentity(
                name=specifier.display_text
                or humanize_identifier(specifier.user_id)
                or NOT_ASSIGNED,
                title="",
                department="Unknown",
                role="User (Not Found)",
            )
        return ApproverIdentity(
            name=user.resolved_name() or specifier.display_text or NOT_ASSIGNED,
            title=user.job_title or "",
            department=user.department or "",
            role=specifier.display_text or "Direct Approver",
        )

    async def _function_identity(
        self, specifier: FunctionSpecifier, context: ResolutionContext
    ) -> ApproverIdentity:
        display_name = None
        if context.company_id:
            display_name = await self.guard.run(
                f"function_name:{specifier.function_id}",
                lambda: self.data_source.get_company_function_display_name(
                    context.company_id, specifier.function_id
                ),
                None,
            )
        return ApproverIdentity(
            name=display_name or specifier.display_text or specifier.function_id,
            title="Function",
            department="Company Scope",
            role="Function-based Approver",
        )

    @staticmethod
    def _unknown_identity(specifier: UnknownSpecifier) -> ApproverIdentity:
        return ApproverIdentity(
            name=specifier.display_text or specifier.value or "Unknown Approver",
            title="Other",
            department="Company Scope",
            role="Other Approver",
        )

    async def _directory_user(
        self, user_id: str, company_id: str | None
    ) -> DirectoryUser | None:
        return await self.guard.run(
            f"directory_user:{user_id}",
            lambda: self.data_source.get_directory_user(user_id, company_id=company_id),
            None,
        )

    async def _position_level(self, position: str) -> int | None:
        return await self.guard.run(
            f"position_level:{position}",
            lambda: self.data_source.get_org_position_level(position),
            None,
        )
