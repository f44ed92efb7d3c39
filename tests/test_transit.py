from decimal import Decimal

import pytest

from vaultworks.ledger import AuthorizationError, Ledger, ResourceError
from vaultworks.transit import Transit


@pytest.fixture
def ledger():
    return Ledger(seed=5)


@pytest.fixture
def setup(ledger):
    dollars = ledger.new_fungible(100, metadata={"name": "Dollar"})
    euros = ledger.new_fungible(100, metadata={"name": "Euro"})
    transit, american, european = Transit.create(
        ledger, 10, 1, dollars.resource_address, euros.resource_address
    )
    return transit, american, european, dollars, euros


def test_prices_must_be_positive(ledger):
    dollars = ledger.new_fungible(1)
    euros = ledger.new_fungible(1)
    with pytest.raises(ValueError):
        Transit.create(ledger, 0, 1, dollars.resource_address, euros.resource_address)
    with pytest.raises(ValueError):
        Transit.create(ledger, 1, -1, dollars.resource_address, euros.resource_address)


def test_badges_and_metadata(setup, ledger):
    transit, american, european, _, _ = setup
    assert american.amount == european.amount == Decimal(1)
    assert ledger.manager(american.resource_address).metadata["symbol"] == "APB"
    assert ledger.manager(transit.ticket_resource_address).metadata["symbol"] == "TK"


def test_buy_ticket_with_dollars_returns_change(setup):
    transit, american, _, dollars, _ = setup
    ticket, change = transit.buy_ticket(dollars.take(15))
    assert ticket.resource_address == transit.ticket_resource_address
    assert ticket.amount == Decimal(1)
    assert change.amount == Decimal(15) - transit.ticket_price
    revenue = transit.withdraw_dollars(True, american)
    assert revenue.amount == transit.ticket_price


def test_buy_ticket_with_euros(setup):
    transit, _, european, _, euros = setup
    transit.buy_ticket(euros.take(10))
    assert transit.withdraw_euros(True, european).amount == transit.ticket_price


def test_buy_ticket_insufficient_payment(setup):
    transit, _, _, dollars, _ = setup
    with pytest.raises(ResourceError, match="Invalid ticket price"):
        transit.buy_ticket(dollars.take(5))


def test_buy_ticket_wrong_currency(setup, ledger):
    transit, _, _, _, _ = setup
    yen = ledger.new_fungible(50)
    with pytest.raises(ResourceError, match="Invalid currency"):
        transit.buy_ticket(yen)
    assert yen.amount == Decimal(50)


def test_ride_burns_ticket(setup, ledger):
    transit, _, _, dollars, _ = setup
    ticket, _ = transit.buy_ticket(dollars.take(10))
    transit.ride(ticket, "American")
    assert ticket.is_empty()
    assert ledger.manager(transit.ticket_resource_address).total_supply == Decimal(0)


def test_unknown_ride_type(setup):
    transit, _, _, dollars, _ = setup
    ticket, _ = transit.buy_ticket(dollars.take(10))
    with pytest.raises(ResourceError, match="Invalid ride"):
        transit.ride(ticket, "Martian")
    assert ticket.amount == Decimal(1)


def test_disabled_rides(setup):
    transit, american, _, dollars, _ = setup
    transit.withdraw_dollars(False, american)
    assert transit.american_rides is False
    ticket, _ = transit.buy_ticket(dollars.take(10))
    with pytest.raises(ResourceError, match="Invalid ride"):
        transit.ride(ticket, "American")
    transit.ride(ticket, "European")
    assert ticket.is_empty()


def test_ride_with_wrong_token(setup):
    transit, _, _, dollars, _ = setup
    with pytest.raises(ResourceError, match="Invalid currency"):
        transit.ride(dollars.take(1), "European")


def test_ride_with_wrong_ticket_count(setup):
    transit, _, _, dollars, _ = setup
    first, _ = transit.buy_ticket(dollars.take(10))
    second, _ = transit.buy_ticket(dollars.take(10))
    first.put(second)
    with pytest.raises(ResourceError, match="Invalid price per ride"):
        transit.ride(first, "American")


def test_withdraw_requires_matching_badge(setup):
    transit, american, european, _, _ = setup
    with pytest.raises(AuthorizationError):
        transit.withdraw_dollars(False, european)
    with pytest.raises(AuthorizationError):
        transit.withdraw_euros(False, american)
    assert transit.american_rides is True
    assert transit.european_rides is True