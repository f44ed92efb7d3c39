"""A utility token that is sold for the native token, and a service that charges in it."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from vaultworks.ledger import (
    DIVISIBILITY_MAXIMUM,
    DIVISIBILITY_NONE,
    AuthorizationError,
    Badge,
    Bucket,
    Ledger,
    ResourceError,
    ResourceManager,
    Vault,
)

logger = logging.getLogger(__name__)

# Used tokens are sent for burning once a service holds more than this many.
REDEEM_THRESHOLD = Decimal(100)
SIMPLE_SERVICE_PRICE = Decimal(1)
PREMIUM_SERVICE_PRICE = Decimal(3)


def _check_count(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer")
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")
    return value


class UtilityTokenFactory:
    """Sells utility tokens for the native token, minting new batches as needed."""

    def __init__(
        self,
        *,
        ledger: Ledger,
        minter: Vault,
        available: Vault,
        collected: Vault,
        price: Decimal,
        mint_size: int,
        max_buy: int,
    ) -> None:
        self._ledger = ledger
        self._minter = minter
        self.minter_badge = minter.resource_address
        self._available = available
        self._collected = collected
        self.token_price = price
        self.mint_size = mint_size
        self.max_buy = max_buy
        self.total_claimed = Decimal(0)
        self.total_minted = mint_size
        self.total_redeemed = Decimal(0)

    @classmethod
    def create(
        cls,
        ledger: Ledger,
        native_token: str,
        my_id: str,
        ut_name: str,
        ut_symbol: str,
        ut_description: str,
        price: int,
        mint_size: int,
        max_buy: int,
    ):
        """Set up a factory; returns it together with a minter badge for its owner."""
        _check_count(price, "price")
        _check_count(mint_size, "mint_size")
        _check_count(max_buy, "max_buy")
        if mint_size == 0:
            raise ValueError("You must specify a non-zero number for the mint_size.")
        if max_buy > mint_size:
            raise ValueError(
                "The single purchase max buy size should be less than or equal to the mint size."
            )

        minter = ledger.new_fungible(2, DIVISIBILITY_NONE, {"name": my_id})
        owner_badge = minter.take(1)
        tokens = ledger.new_fungible(
            0,
            DIVISIBILITY_MAXIMUM,
            {"name": ut_name, "symbol": ut_symbol, "description": ut_description},
            minter=minter.resource_address,
        )
        first_batch = ledger.manager(tokens.resource_address).mint(mint_size, minter)
        first_batch.put(tokens)

        factory = cls(
            ledger=ledger,
            minter=Vault.with_bucket(minter),
            available=Vault.with_bucket(first_batch),
            collected=Vault(ledger.manager(native_token)),
            price=Decimal(price),
            mint_size=mint_size,
            max_buy=max_buy,
        )
        return factory, owner_badge

    @property
    def address(self) -> str:
        """Address of the utility token."""
        return self._available.resource_address

    @property
    def token_manager(self) -> ResourceManager:
        return self._ledger.manager(self.address)

    @property
    def native_token(self) -> str:
        return self._collected.resource_address

    @property
    def available(self) -> Decimal:
        return self._available.amount

    @property
    def claimable(self) -> Decimal:
        return self._collected.amount

    def _require_badge(self, badge: Optional[Badge]) -> None:
        if badge is None or badge.resource_address != self.minter_badge or badge.amount <= 0:
            raise AuthorizationError("this operation requires the minter badge")

    def purchase(self, number: int, payment: Bucket) -> tuple[Bucket, Bucket]:
        """Buy up to max_buy tokens; returns the change and the tokens bought.

        When the payment does not cover the price, nothing is bought and the
        whole payment comes back with an empty token bucket.
        """
        if payment.resource_address != self.native_token:
            raise ResourceError("You must purchase the utility tokens with Radix (XRD).")
        num = _check_count(number, "number")
        bought = Bucket(self.token_manager)
        if num > self.max_buy:
            num = self.max_buy
            logger.info("A max of %s tokens can be purcahsed at a time.", self.max_buy)

        cost = self.token_price * num
        if payment.amount < cost:
            logger.info(
                "Insufficient funds. Required payment for %s UT tokens is %s XRD.", num, cost
            )
            return payment, bought

        logger.info("Thank you!")
        if self._available.amount < num:
            self._available.put(self.token_manager.mint(self.mint_size, self._minter))
            self.total_minted += self.mint_size
        self._collected.put(payment.take(cost))
        bought.put(self._available.take(num))
        return payment, bought

    def show_bank(self, badge: Optional[Badge]) -> dict:
        """Report the factory's holdings and totals; requires the minter badge."""
        self._require_badge(badge)
        symbol = self.token_manager.metadata.get("symbol", "")
        report = {
            "symbol": symbol,
            "available": self._available.amount,
            "claimable": self._collected.amount,
            "total_claimed": self.total_claimed,
            "total_minted": self.total_minted,
            "total_redeemed": self.total_redeemed,
        }
        logger.info("Available %s: %s", symbol, report["available"])
        logger.info("Claimable XRD: %s", report["claimable"])
        logger.info("Total XRD Claimed: %s", report["total_claimed"])
        logger.info("Total %s Minted: %s", symbol, report["total_minted"])
        logger.info("Total %s Redeemed: %s", symbol, report["total_redeemed"])
        return report

    def claim(self, badge: Optional[Badge]) -> Bucket:
        """Withdraw all collected payments; requires the minter badge."""
        self._require_badge(badge)
        self.total_claimed += self._collected.amount
        return self._collected.take_all()

    def redeem(self, used_tokens: Bucket) -> None:
        """Burn used utility tokens; an empty bucket is ignored."""
        if used_tokens.amount > 0:
            if used_tokens.resource_address != self.address:
                raise ResourceError("You can only redeem the expected utility tokens.")
            self.total_redeemed += used_tokens.amount
            self.token_manager.burn(used_tokens, self._minter)


class ServiceStub:
    """Two stand-in services paid for in utility tokens of a factory."""

    def __init__(self, utf: UtilityTokenFactory) -> None:
        self.utf = utf
        self._used_tokens = Vault(utf.token_manager)
        self.simple_service_count = 0
        self.premium_service_count = 0

    @property
    def used_amount(self) -> Decimal:
        return self._used_tokens.amount

    def _maybe_redeem(self) -> None:
        if self._used_tokens.amount > REDEEM_THRESHOLD:
            self.utf.redeem(self._used_tokens.take_all())

    def _charge(self, payment: Bucket, price: Decimal, message: str) -> None:
        if payment.resource_address != self.utf.address or payment.amount < price:
            raise ResourceError(message)
        self._used_tokens.put(payment.take(price))

    def show(self) -> dict:
        """Counts of the services performed so far."""
        logger.info("Simple Services performed: %s", self.simple_service_count)
        logger.info("Premium Services performed: %s", self.premium_service_count)
        return {"simple": self.simple_service_count, "premium": self.premium_service_count}

    def simple_service(self, payment: Bucket) -> Bucket:
        """Perform the simple service for one token; returns the change."""
        self._charge(payment, SIMPLE_SERVICE_PRICE, "Simple service requires 1 util token")
        logger.info("Performing Simple Service now.")
        self.simple_service_count += 1
        self._maybe_redeem()
        return payment

    def premium_service(self, payment: Bucket) -> Bucket:
        """Perform the premium service for three tokens; returns the change."""
        self._charge(payment, PREMIUM_SERVICE_PRICE, "Premium service requires 3 util tokens")
        logger.info("Performing Premium Service now.")
        self.premium_service_count += 1
        self._maybe_redeem()
        return payment