# cauldron_indexer/core/networks.py
"""
Static per-network configuration tables.

Each network lists the vault factories (BentoBox / DegenBox) whose LogDeploy
events announce new cauldrons, together with the allow-list that decides
which clones get watched. Factories deploy many unrelated instruments, so
anything not on the list is ignored.
"""

from typing import Dict, List, Literal, Optional
from msgspec import Struct, field

from ..types import EvmAddress, MethodSelector
from ..utils.addresses import in_address_set

FilterMode = Literal["master_contract", "clone_address", "deployer"]

# liquidate(address[],uint256[],address,address)
DIRECT_LIQUIDATION_SELECTOR = MethodSelector("0x912860c5")

# Master contracts whose accrueInfo() returns the older two-field layout
LEGACY_ACCRUE_INFO_MASTER_CONTRACTS = [
    EvmAddress("0x469a991a6bb8cbbfee42e7ab846edeef1bc0b3d3"), # CauldronLowRiskV1
    EvmAddress("0x4a9cb5d0b755275fd188f87c0a8df531b0c7c7d2"), # CauldronMediumRiskV1
]


class DeployFilter(Struct):
    mode: FilterMode
    addresses: List[EvmAddress]

    def matches(self, master_contract: str, clone_address: str, deployer: str) -> bool:
        candidate = {
            "master_contract": master_contract,
            "clone_address": clone_address,
            "deployer": deployer,
        }[self.mode]
        return in_address_set(candidate, self.addresses)


class FactorySource(Struct):
    name: str
    address: EvmAddress
    filter: DeployFilter
    start_block: int = 0


class MarketCapabilities(Struct):
    """Feature switches for the cauldron handlers across protocol versions"""
    corrected_collateral_conversion: bool = True
    direct_liquidation_flag: bool = True
    collateral_name: bool = True

    @classmethod
    def legacy(cls) -> "MarketCapabilities":
        return cls(
            corrected_collateral_conversion=False,
            direct_liquidation_flag=False,
            collateral_name=False,
        )


class NetworkConfig(Struct, kw_only=True):
    name: str
    chain_id: int
    factories: List[FactorySource]
    legacy_master_contracts: List[EvmAddress] = field(
        default_factory=lambda: list(LEGACY_ACCRUE_INFO_MASTER_CONTRACTS)
    )
    direct_liquidation_selector: MethodSelector = DIRECT_LIQUIDATION_SELECTOR
    capabilities: MarketCapabilities = field(default_factory=MarketCapabilities)

    def get_factory(self, address: str) -> Optional[FactorySource]:
        for factory in self.factories:
            if factory.address.lower() == address.lower():
                return factory
        return None

    def is_legacy_master_contract(self, master_contract: Optional[str]) -> bool:
        return in_address_set(master_contract, self.legacy_master_contracts)


MAINNET_MASTER_CONTRACTS = [
    EvmAddress("0x63905bb681b9e68682f392df2b22b7170f78d300"), # CauldronV2Flat
    EvmAddress("0x476b1E35DDE474cB9Aa1f6B85c9Cc589BFa85c1F"), # CauldronV2
    EvmAddress("0x1df188958a8674b5177f77667b8d173c3cdd9e51"), # CauldronV2CheckpointV1
    EvmAddress("0x4a9cb5d0b755275fd188f87c0a8df531b0c7c7d2"), # CauldronMediumRiskV1
    EvmAddress("0x469a991a6bb8cbbfee42e7ab846edeef1bc0b3d3"), # CauldronLowRiskV1
]

# Operator accounts that deploy cauldrons through the DegenBox. Not checked
# against a deployment registry; a networks file can replace them.
MAINNET_DEGENBOX_DEPLOYERS = [
    EvmAddress("0xfddfE525054efaAD204600d00CA86ADb1Cc2ea8a"),
    EvmAddress("0xb4EfdA6DAf5ef75D08869A0f9C0213278fb43b6C"),
]

FANTOM_MASTER_CONTRACTS = [
    EvmAddress("0xe802823719f9d2520415854e6f95bae498ff1d52"), # CauldronV2FTM
    EvmAddress("0x99d8a9c45b2eca8864373a26d1459e3dff1e17f3"), # KashiPairMediumRiskV2
]

# Arbitrum filters on the clone itself
ARBITRUM_CAULDRONS = [
    EvmAddress("0xC89958B03A55B5de2221aCB25B58B89A000215E6"), # weth cauldron
]

AVALANCHE_MASTER_CONTRACTS = [
    EvmAddress("0xc568a699c5b43a0f1ae40d3254ee641cb86559f4"), # CauldronV2Multichain
    EvmAddress("0x02e07b6f27e5ec37ca6e9f846b6d48704031625a"), # CauldronV2Multichain
]

BSC_MASTER_CONTRACTS = [
    EvmAddress("0x26fa3fffb6efe8c1e69103acb4044c26b9a106a9"), # CauldronV2Multichain
]


NETWORKS: Dict[str, NetworkConfig] = {
    "mainnet": NetworkConfig(
        name="mainnet",
        chain_id=1,
        factories=[
            FactorySource(
                name="bentobox",
                address=EvmAddress("0xF5BCE5077908a1b7370B9ae04AdC565EBd643966"),
                filter=DeployFilter(mode="master_contract", addresses=MAINNET_MASTER_CONTRACTS),
                start_block=12094175,
            ),
            FactorySource(
                name="degenbox",
                address=EvmAddress("0xd96f48665a1410C0cd669A88898ecA36B9Fc2cce"),
                filter=DeployFilter(mode="deployer", addresses=MAINNET_DEGENBOX_DEPLOYERS),
                start_block=13204826,
            ),
        ],
    ),
    "fantom": NetworkConfig(
        name="fantom",
        chain_id=250,
        factories=[
            FactorySource(
                name="bentobox",
                address=EvmAddress("0xF5BCE5077908a1b7370B9ae04AdC565EBd643966"),
                filter=DeployFilter(mode="master_contract", addresses=FANTOM_MASTER_CONTRACTS),
            ),
        ],
    ),
    "arbitrum": NetworkConfig(
        name="arbitrum",
        chain_id=42161,
        factories=[
            FactorySource(
                name="bentobox",
                address=EvmAddress("0x74c764D41B77DBbb4fe771daB1939B00b146894A"),
                filter=DeployFilter(mode="clone_address", addresses=ARBITRUM_CAULDRONS),
            ),
        ],
    ),
    "avalanche": NetworkConfig(
        name="avalanche",
        chain_id=43114,
        factories=[
            FactorySource(
                name="degenbox",
                address=EvmAddress("0xD825d06061fdc0585e4373F0A3F01a8C02b0e6A4"),
                filter=DeployFilter(mode="master_contract", addresses=AVALANCHE_MASTER_CONTRACTS),
            ),
        ],
    ),
    "bsc": NetworkConfig(
        name="bsc",
        chain_id=56,
        factories=[
            FactorySource(
                name="degenbox",
                address=EvmAddress("0x090185f2135308BaD17527004364eBcC2D37e5F6"),
                filter=DeployFilter(mode="master_contract", addresses=BSC_MASTER_CONTRACTS),
            ),
        ],
    ),
}
