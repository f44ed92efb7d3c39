"""A name service mapping names ending in ".xrd" to component addresses."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from vaultworks.ledger import (
    DIVISIBILITY_NONE,
    AuthorizationError,
    Badge,
    Bucket,
    Ledger,
    Proof,
    ResourceError,
    Vault,
)

# With an average epoch of about 35 minutes, roughly 15k epochs fit into one year.
EPOCHS_PER_YEAR = 15_000

_MAX_YEARS = 255


def _fmt(amount: Decimal) -> str:
    return format(amount.normalize(), "f")


def hash_name(name: str) -> int:
    """SHA-256 of the name, its first 16 bytes read as a little-endian 128-bit integer."""
    digest = hashlib.sha256(name.encode("utf-8")).digest()
    return int.from_bytes(digest[:16], "little")


def _check_years(years: int, message: str) -> None:
    if isinstance(years, bool) or not isinstance(years, int):
        raise TypeError("years must be an integer")
    if years > _MAX_YEARS or years < 0:
        raise ValueError(f"years must be between 0 and {_MAX_YEARS}, got {years}")
    if years == 0:
        raise ResourceError(message)


@dataclass
class DomainName:
    """Data carried by a name NFT."""

    address: str
    last_valid_epoch: int
    deposit_amount: Decimal


class NameService:
    """Registers names against a deposit; address updates and renewals cost a fee."""

    def __init__(
        self,
        *,
        ledger: Ledger,
        admin_badge: str,
        minter: Vault,
        name_resource: str,
        deposits: Vault,
        fees: Vault,
        deposit_per_year: Decimal,
        fee_address_update: Decimal,
        fee_renewal_per_year: Decimal,
    ) -> None:
        self._ledger = ledger
        self.admin_badge = admin_badge
        self._minter = minter
        self.name_resource = name_resource
        self._deposits = deposits
        self._fees = fees
        self.deposit_per_year = deposit_per_year
        self.fee_address_update = fee_address_update
        self.fee_renewal_per_year = fee_renewal_per_year

    @classmethod
    def create(cls, ledger: Ledger, native_token: str, deposit_per_year, fee_address_update, fee_renewal_per_year):
        """Set up the service; returns it together with its admin badge."""
        admin_badge = ledger.new_fungible(1, DIVISIBILITY_NONE)
        minter = ledger.new_fungible(1, DIVISIBILITY_NONE)
        names = ledger.new_non_fungible({"name": "DomainName"}, minter=minter.resource_address)
        native = ledger.manager(native_token)
        service = cls(
            ledger=ledger,
            admin_badge=admin_badge.resource_address,
            minter=Vault.with_bucket(minter),
            name_resource=names.address,
            deposits=Vault(native),
            fees=Vault(native),
            deposit_per_year=Decimal(str(deposit_per_year)),
            fee_address_update=Decimal(str(fee_address_update)),
            fee_renewal_per_year=Decimal(str(fee_renewal_per_year)),
        )
        return service, admin_badge

    @property
    def native_token(self) -> str:
        return self._deposits.resource_address

    @property
    def _names(self):
        return self._ledger.manager(self.name_resource)

    def _check_name_proof(self, name_nft: Proof) -> None:
        if name_nft.resource_address != self.name_resource:
            raise ResourceError("The supplied bucket does not contain a domain name NFT")
        if name_nft.amount != 1:
            raise ResourceError("The supplied bucket must contain exactly one DomainName NFT")

    def _check_fee(self, fee: Bucket, fee_amount: Decimal) -> None:
        if fee.resource_address != self.native_token:
            raise ResourceError("The fee must be payed in XRD")
        if fee.amount < fee_amount:
            raise ResourceError(
                f"Insufficient fee amount. You need to send a fee of {_fmt(fee_amount)} XRD"
            )

    def lookup_address(self, name: str) -> str:
        """The address a registered name maps to; raises if the name is not registered."""
        data: DomainName = self._names.get_non_fungible_data(hash_name(name))
        return data.address

    def register_name(self, name: str, target_address: str, reserve_years: int, deposit: Bucket) -> tuple[Bucket, Bucket]:
        """Register a name for some years; returns the name NFT and the overpaid deposit."""
        if not name.endswith(".xrd"):
            raise ResourceError("The domain name must end on '.xrd'")
        _check_years(reserve_years, "A name must be reserved for at least one year")
        if deposit.resource_address != self.native_token:
            raise ResourceError("The deposit must be made in XRD")

        deposit_amount = self.deposit_per_year * reserve_years
        last_valid_epoch = self._ledger.epoch + EPOCHS_PER_YEAR * reserve_years
        if deposit.amount < deposit_amount:
            raise ResourceError(
                f"Insufficient deposit. You need to send a deposit of {_fmt(deposit_amount)} XRD"
            )

        name_nft = self._names.mint_non_fungible(
            hash_name(name),
            DomainName(target_address, last_valid_epoch, deposit_amount),
            self._minter,
        )
        self._deposits.put(deposit.take(deposit_amount))
        return name_nft, deposit

    def unregister_name(self, name_nft: Bucket) -> Bucket:
        """Burn the name NFTs in the bucket and refund their deposits."""
        if name_nft.resource_address != self.name_resource:
            raise ResourceError("The supplied bucket does not contain a domain name NFT")
        if name_nft.is_empty():
            raise ResourceError("The supplied bucket is empty")

        total = sum(
            (self._names.get_non_fungible_data(nft_id).deposit_amount for nft_id in name_nft.non_fungible_ids()),
            Decimal(0),
        )
        self._names.burn(name_nft, self._minter)
        return self._deposits.take(total)

    def update_address(self, name_nft: Proof, new_address: str, fee: Bucket) -> Bucket:
        """Point a name at a new address for a fee; returns the overpaid fee."""
        self._check_name_proof(name_nft)
        fee_amount = self.fee_address_update
        self._check_fee(fee, fee_amount)

        nft_id = name_nft.non_fungible_id()
        data: DomainName = self._names.get_non_fungible_data(nft_id)
        data.address = new_address
        self._names.update_non_fungible_data(nft_id, data, self._minter)
        self._fees.put(fee.take(fee_amount))
        return fee

    def renew_name(self, name_nft: Proof, renew_years: int, fee: Bucket) -> Bucket:
        """Extend a name's validity for a fee; returns the overpaid fee."""
        self._check_name_proof(name_nft)
        if fee.resource_address != self.native_token:
            raise ResourceError("The fee must be payed in XRD")
        _check_years(renew_years, "The name must be renewed for at least one year")
        fee_amount = self.fee_renewal_per_year * renew_years
        self._check_fee(fee, fee_amount)

        nft_id = name_nft.non_fungible_id()
        data: DomainName = self._names.get_non_fungible_data(nft_id)
        data.last_valid_epoch += EPOCHS_PER_YEAR * renew_years
        self._names.update_non_fungible_data(nft_id, data, self._minter)
        self._fees.put(fee.take(fee_amount))
        return fee

    def withdraw_fees(self, admin: Optional[Badge]) -> Bucket:
        """Withdraw all fees paid; deposits stay locked. Requires the admin badge."""
        if admin is None or admin.resource_address != self.admin_badge or admin.amount <= 0:
            raise AuthorizationError("this operation requires the admin badge")
        return self._fees.take_all()