"""Client library for the ROC rental-contract API.

Typical use::

    from roc_contracts import ContractAction, ContractLifecycleService, ContractService, get_settings

    settings = get_settings()
    async with ContractService(settings) as contracts:
        lifecycle = ContractLifecycleService(contracts, settings)
        contract = await contracts.get_contract("ctr-1")
        if ContractAction.activate in lifecycle.available_actions(contract):
            contract = await lifecycle.activate(contract)
"""

from roc_contracts.core.config import Settings, get_settings
from roc_contracts.domain.contract_lifecycle import ContractLifecyclePolicy
from roc_contracts.enums import ContractAction, ContractStatus
from roc_contracts.services.contract import ContractService
from roc_contracts.services.contract_lifecycle import ContractLifecycleService

__all__ = [
    "ContractAction",
    "ContractLifecyclePolicy",
    "ContractLifecycleService",
    "ContractService",
    "ContractStatus",
    "Settings",
    "get_settings",
]
