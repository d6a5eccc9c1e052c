import logging
from datetime import datetime

from roc_contracts.core.config import Settings
from roc_contracts.domain.contract_analytics import utcnow
from roc_contracts.domain.contract_lifecycle import ContractLifecyclePolicy
from roc_contracts.enums import ContractAction, ContractStatus, SignatureType
from roc_contracts.schemas.contract import Contract, ContractTermsUpdate, UpdateContractRequest
from roc_contracts.services.contract import ContractService, coerce_enum

logger = logging.getLogger(__name__)


class ContractLifecycleService:
    """Drive lifecycle actions for a contract the caller is displaying.

    Each action checks its guard against the caller's snapshot first, so an
    illegal action raises before any request goes out. The snapshot itself is
    never modified: the returned contract is always the server's version
    (re-fetched after the mutation when ``refetch_after_mutation`` is on).
    """

    def __init__(self, contracts: ContractService, settings: Settings):
        self.contracts = contracts
        self.settings = settings

    def policy(self, now: datetime | None = None) -> ContractLifecyclePolicy:
        return ContractLifecyclePolicy(
            now=now or utcnow(), expiring_soon_days=self.settings.expiring_soon_days
        )

    def available_actions(self, contract: Contract, now: datetime | None = None) -> list[ContractAction]:
        return self.policy(now).available_actions(contract)

    async def _reconcile(self, contract_id: str, returned: Contract) -> Contract:
        if not self.settings.refetch_after_mutation:
            return returned
        return await self.contracts.get_contract(contract_id)

    async def send_for_signatures(self, contract: Contract) -> Contract:
        self.policy().send_for_signatures(contract)
        returned = await self.contracts.update_contract(
            contract.id, UpdateContractRequest(status=ContractStatus.pending_signatures)
        )
        logger.info("Contract %s sent for signatures", contract.id)
        return await self._reconcile(contract.id, returned)

    async def sign(
        self,
        contract: Contract,
        signature_type: SignatureType | str,
        guarantor_id: str | None = None,
        signature: str | None = None,
    ) -> Contract:
        signature_type = coerce_enum(SignatureType, signature_type, "signature_type")
        self.policy().sign(contract, signature_type, guarantor_id, signature)
        returned = await self.contracts.sign_contract(contract.id, signature_type, guarantor_id, signature)
        logger.info("Contract %s signed by %s", contract.id, signature_type.value)
        return await self._reconcile(contract.id, returned)

    async def activate(self, contract: Contract) -> Contract:
        self.policy().activate(contract)
        returned = await self.contracts.activate_contract(contract.id)
        logger.info("Contract %s activated", contract.id)
        return await self._reconcile(contract.id, returned)

    async def terminate(self, contract: Contract, reason: str) -> Contract:
        self.policy().terminate(contract, reason)
        returned = await self.contracts.terminate_contract(contract.id, reason)
        logger.info("Contract %s terminated", contract.id)
        return await self._reconcile(contract.id, returned)

    async def renew(
        self,
        contract: Contract,
        new_end_date: datetime,
        new_terms: ContractTermsUpdate | None = None,
    ) -> Contract:
        self.policy().renew(contract, new_end_date, new_terms)
        returned = await self.contracts.renew_contract(contract.id, new_end_date, new_terms)
        logger.info("Contract %s renewed until %s", contract.id, returned.end_date.date())
        return await self._reconcile(contract.id, returned)

    async def cancel(self, contract: Contract) -> Contract:
        self.policy().cancel(contract)
        returned = await self.contracts.update_contract(
            contract.id, UpdateContractRequest(status=ContractStatus.cancelled)
        )
        logger.info("Contract %s cancelled", contract.id)
        return await self._reconcile(contract.id, returned)
