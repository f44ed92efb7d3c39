"""A transit operator selling ride tickets for dollars or euros."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from vaultworks.ledger import (
    DIVISIBILITY_NONE,
    AuthorizationError,
    Badge,
    Bucket,
    Ledger,
    ResourceError,
    Vault,
)

logger = logging.getLogger(__name__)


class Transit:
    """Sells tickets, burns them on rides, and lets each host collect revenue."""

    def __init__(
        self,
        *,
        ledger: Ledger,
        ticket_price: Decimal,
        ride_price: Decimal,
        ticket_resource_address: str,
        ticket_minter: Vault,
        american_host_badge: str,
        european_host_badge: str,
        collected_dollars: Vault,
        collected_euros: Vault,
    ) -> None:
        self._ledger = ledger
        self.ticket_price = ticket_price
        self.ride_price = ride_price
        self.ticket_resource_address = ticket_resource_address
        self._ticket_minter = ticket_minter
        self.american_host_badge = american_host_badge
        self.european_host_badge = european_host_badge
        self._collected_dollars = collected_dollars
        self._collected_euros = collected_euros
        self.american_rides = True
        self.european_rides = True

    @classmethod
    def create(cls, ledger: Ledger, price_per_ticket, price_per_ride, dollar: str, euro: str):
        """Set up the operator; returns it with the American and European host badges."""
        ticket_price = Decimal(str(price_per_ticket))
        ride_price = Decimal(str(price_per_ride))
        if not (ticket_price > 0 and ride_price > 0):
            raise ValueError("ticket and ride prices must be positive")

        american = ledger.new_fungible(
            1,
            DIVISIBILITY_NONE,
            {"name": "American Host Badge", "symbol": "APB",
             "description": "A badge that grants american host privileges"},
        )
        european = ledger.new_fungible(
            1,
            DIVISIBILITY_NONE,
            {"name": "European Host Badge", "symbol": "EPB",
             "description": "A badge that grants european host privileges"},
        )
        minter = ledger.new_fungible(1, DIVISIBILITY_NONE, {"name": "Ticket Mint Auth"})
        tickets = ledger.new_fungible(
            0,
            DIVISIBILITY_NONE,
            {"name": "Ticket", "symbol": "TK", "description": "A ticket used for rides"},
            minter=minter.resource_address,
        )
        transit = cls(
            ledger=ledger,
            ticket_price=ticket_price,
            ride_price=ride_price,
            ticket_resource_address=tickets.resource_address,
            ticket_minter=Vault.with_bucket(minter),
            american_host_badge=american.resource_address,
            european_host_badge=european.resource_address,
            collected_dollars=Vault(ledger.manager(dollar)),
            collected_euros=Vault(ledger.manager(euro)),
        )
        return transit, american, european

    @staticmethod
    def _require(badge: Optional[Badge], address: str) -> None:
        if badge is None or badge.resource_address != address or badge.amount <= 0:
            raise AuthorizationError("this operation requires the host badge")

    def withdraw_dollars(self, availability: bool, badge: Optional[Badge]) -> Bucket:
        """Set whether American rides run and collect all dollar revenue."""
        self._require(badge, self.american_host_badge)
        self.american_rides = availability
        return self._collected_dollars.take_all()

    def withdraw_euros(self, availability: bool, badge: Optional[Badge]) -> Bucket:
        """Set whether European rides run and collect all euro revenue."""
        self._require(badge, self.european_host_badge)
        self.european_rides = availability
        return self._collected_euros.take_all()

    def buy_ticket(self, payment: Bucket) -> tuple[Bucket, Bucket]:
        """Buy one ticket; returns the ticket and the change."""
        dollars = payment.resource_address == self._collected_dollars.resource_address
        euros = payment.resource_address == self._collected_euros.resource_address

        if payment.amount < self.ticket_price:
            raise ResourceError("Invalid ticket price")
        if not (dollars or euros):
            raise ResourceError("Invalid currency")

        vault = self._collected_dollars if dollars else self._collected_euros
        vault.put(payment.take(self.ticket_price))
        ticket = self._ledger.manager(self.ticket_resource_address).mint(1, self._ticket_minter)
        return ticket, payment

    def ride(self, payment: Bucket, ride_type: str) -> None:
        """Take a ride of the given type ("American" or "European"), burning the tickets paid."""
        valid_ride = (ride_type == "American" and self.american_rides) or (
            ride_type == "European" and self.european_rides
        )
        if not valid_ride:
            raise ResourceError("Invalid ride")
        if payment.resource_address != self.ticket_resource_address:
            raise ResourceError("Invalid currency")
        if payment.amount != self.ride_price:
            raise ResourceError("Invalid price per ride")

        self._ledger.manager(self.ticket_resource_address).burn(payment, self._ticket_minter)
        logger.info("Welcome to the transit, have fun!")