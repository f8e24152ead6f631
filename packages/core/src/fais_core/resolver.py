"""Affidavit target resolution.

Decides whose affidavit a request may read. Every line-item read and every
form fill goes through ``AffidavitTargetResolver.resolve`` first and uses
only the id it returns.
"""

from typing import Optional

import structlog

from .exceptions import ForbiddenError, InvalidInputError, NotFoundError
from .models import AffidavitQuery, Case, Principal, is_valid_entity_id
from .store import PartyDirectory

logger = structlog.get_logger()


class AffidavitTargetResolver:
    """Authorize a principal against a target party and its case.

    Rules:
        1. An explicit ``userId`` is honoured only for administrators.
        2. Respondents and respondent attorneys must name a case on which
           they hold a respondent-side slot; the target is that case's
           petitioner.
        3. Everyone else reads their own affidavit.
    """

    def __init__(self, directory: PartyDirectory):
        self.directory = directory

    async def resolve(
        self, principal: Principal, query: Optional[AffidavitQuery] = None
    ) -> str:
        """Return the target user id for ``principal``.

        Raises:
            ForbiddenError: The principal may not read the requested data.
            InvalidInputError: A supplied id is malformed or a required
                case id is missing.
            NotFoundError: The named user or case does not exist.
        """
        query = query or AffidavitQuery()

        if query.user_id is not None:
            return await self._resolve_explicit_user(principal, query.user_id)

        if principal.role.views_petitioner:
            return await self._resolve_petitioner(principal, query.case_id)

        logger.debug("affidavit_target_self", principal_id=principal.user_id)
        return principal.user_id

    async def _resolve_explicit_user(self, principal: Principal, user_id: str) -> str:
        if not principal.is_admin:
            logger.info(
                "affidavit_target_denied",
                principal_id=principal.user_id,
                reason="explicit_user_requires_admin",
            )
            raise ForbiddenError(
                principal_id=principal.user_id, role=principal.role.label
            )
        if not is_valid_entity_id(user_id):
            raise InvalidInputError("Invalid userId", field="userId")
        party = await self.directory.get_party(user_id)
        if party is None:
            raise NotFoundError("Not found", entity="user", entity_id=user_id)
        if not party.role.carries_affidavit:
            logger.warning(
                "affidavit_target_not_a_party",
                principal_id=principal.user_id,
                target=user_id,
                role=party.role.label,
            )
        logger.debug(
            "affidavit_target_explicit", principal_id=principal.user_id, target=user_id
        )
        return user_id

    async def _resolve_petitioner(
        self, principal: Principal, case_id: Optional[str]
    ) -> str:
        if not case_id:
            raise InvalidInputError(
                "Respondents must provide caseId to view an affidavit", field="caseId"
            )
        if not is_valid_entity_id(case_id):
            raise InvalidInputError("Invalid caseId", field="caseId")
        case = await self.directory.get_case(case_id)
        if case is None:
            raise NotFoundError("Case not found", entity="case", entity_id=case_id)
        if not case.on_respondent_side(principal.user_id) or not case.petitioner_id:
            logger.info(
                "affidavit_target_denied",
                principal_id=principal.user_id,
                case_id=case_id,
                reason="not_respondent_on_case",
            )
            raise ForbiddenError(
                principal_id=principal.user_id, role=principal.role.label
            )
        logger.debug(
            "affidavit_target_petitioner",
            principal_id=principal.user_id,
            case_id=case_id,
            target=case.petitioner_id,
        )
        return case.petitioner_id

    async def resolve_case(
        self,
        principal: Principal,
        target_user_id: str,
        case_id: Optional[str] = None,
    ) -> Optional[Case]:
        """Pick the case whose caption goes on the official form.

        An explicit ``case_id`` must include the target party and, for
        non-administrators, the principal. Without one, the most recently
        created case that includes the target is used, if any.
        """
        if not case_id:
            case = await self.directory.latest_case_for(target_user_id)
            logger.debug(
                "affidavit_case_latest",
                target=target_user_id,
                case_id=case.id if case else None,
            )
            return case

        if not is_valid_entity_id(case_id):
            raise InvalidInputError("Invalid caseId", field="caseId")
        case = await self.directory.get_case(case_id)
        if case is None:
            raise NotFoundError("Case not found", entity="case", entity_id=case_id)
        if not case.includes(target_user_id):
            raise InvalidInputError(
                "Case does not include the target user",
                field="caseId",
                constraint="Case must include the affidavit subject",
            )
        if not principal.is_admin and not case.includes(principal.user_id):
            raise ForbiddenError(
                principal_id=principal.user_id, role=principal.role.label
            )
        return case

    async def resolve_owner(
        self, principal: Principal, query: Optional[AffidavitQuery] = None
    ) -> str:
        """Return the owner whose line items ``principal`` may change.

        Viewing rights do not carry write rights: only the owner, or an
        administrator naming the owner, may create, patch or delete rows.
        """
        target = await self.resolve(principal, query)
        if target != principal.user_id and not principal.is_admin:
            logger.info(
                "affidavit_write_denied",
                principal_id=principal.user_id,
                target=target,
            )
            raise ForbiddenError(
                principal_id=principal.user_id, role=principal.role.label
            )
        return target
