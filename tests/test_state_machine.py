import pytest

from shared.errors import AlreadyAssignedError, ForbiddenError, InvalidStatusError, InvalidTransitionError
from shared.security import Actor, Role
from services.order_service import state_machine as sm
from services.order_service.models import OrderStatus
from services.realtime_service.channels import RIDERS_ONLINE, restaurant_channel, user_channel

PARTIES = sm.OrderParties(
    customer_id="cust-1",
    restaurant_id="rest-1",
    restaurant_owner_id="owner-1",
    rider_id=None,
)
WITH_RIDER = sm.OrderParties(
    customer_id="cust-1",
    restaurant_id="rest-1",
    restaurant_owner_id="owner-1",
    rider_id="rider-1",
)

CUSTOMER = Actor("cust-1", Role.CUSTOMER)
OTHER_CUSTOMER = Actor("cust-2", Role.CUSTOMER)
OWNER = Actor("owner-1", Role.RESTAURANT)
OTHER_OWNER = Actor("owner-2", Role.RESTAURANT)
RIDER = Actor("rider-1", Role.RIDER)
OTHER_RIDER = Actor("rider-2", Role.RIDER)
ADMIN = Actor("admin-1", Role.ADMIN)


@pytest.mark.parametrize(
    "actor, parties, expected",
    [
        (CUSTOMER, PARTIES, sm.Relation.CUSTOMER),
        (OTHER_CUSTOMER, PARTIES, sm.Relation.NONE),
        (OWNER, PARTIES, sm.Relation.RESTAURANT),
        (OTHER_OWNER, PARTIES, sm.Relation.NONE),
        (RIDER, PARTIES, sm.Relation.NONE),
        (RIDER, WITH_RIDER, sm.Relation.RIDER),
        (OTHER_RIDER, WITH_RIDER, sm.Relation.NONE),
        (ADMIN, WITH_RIDER, sm.Relation.NONE),
    ],
)
def test_relation_of(actor, parties, expected):
    assert sm.relation_of(actor, parties) == expected


def test_restaurant_without_known_owner_has_no_relation():
    orphan = sm.OrderParties("cust-1", "rest-1", None, None)
    assert sm.relation_of(OWNER, orphan) == sm.Relation.NONE


def test_admin_can_view_but_strangers_cannot():
    assert sm.can_view(ADMIN, PARTIES)
    assert sm.can_view(CUSTOMER, PARTIES)
    assert not sm.can_view(OTHER_CUSTOMER, PARTIES)
    assert not sm.can_view(RIDER, PARTIES)


def test_only_customers_place_orders():
    sm.check_can_place(CUSTOMER)
    for actor in (OWNER, RIDER, ADMIN):
        with pytest.raises(ForbiddenError):
            sm.check_can_place(actor)


class TestAccept:

    def test_owner_accepts_placed_order(self):
        sm.check_accept(OrderStatus.PLACED, OWNER, PARTIES)

    def test_other_restaurant_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            sm.check_accept(OrderStatus.PLACED, OTHER_OWNER, PARTIES)

    def test_customer_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            sm.check_accept(OrderStatus.PLACED, CUSTOMER, PARTIES)

    @pytest.mark.parametrize("status", [s for s in OrderStatus if s != OrderStatus.PLACED])
    def test_only_placed_orders_can_be_accepted(self, status):
        with pytest.raises(InvalidTransitionError):
            sm.check_accept(status, OWNER, PARTIES)


class TestStatusTarget:

    @pytest.mark.parametrize("raw", ["PREPARING", "READY", "PICKED", "DELIVERED", "CANCELLED"])
    def test_valid_targets(self, raw):
        assert sm.parse_update_target(raw) == OrderStatus(raw)

    @pytest.mark.parametrize("raw", ["PLACED", "ACCEPTED", "cooking", "", "ready"])
    def test_invalid_targets(self, raw):
        with pytest.raises(InvalidStatusError):
            sm.parse_update_target(raw)


class TestStatusUpdateAuthorization:

    def test_stranger_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            sm.check_status_update(OrderStatus.ACCEPTED, OrderStatus.READY, OTHER_OWNER, PARTIES)

    def test_unassigned_rider_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            sm.check_status_update(OrderStatus.READY, OrderStatus.PICKED, OTHER_RIDER, WITH_RIDER)

    def test_admin_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            sm.check_status_update(OrderStatus.READY, OrderStatus.CANCELLED, ADMIN, WITH_RIDER)

    def test_customer_may_only_cancel(self):
        assert sm.check_status_update(
            OrderStatus.PLACED, OrderStatus.CANCELLED, CUSTOMER, PARTIES
        ) == sm.Relation.CUSTOMER
        with pytest.raises(ForbiddenError):
            sm.check_status_update(OrderStatus.PICKED, OrderStatus.DELIVERED, CUSTOMER, PARTIES)

    def test_permissive_mode_allows_skipping_and_reversing(self):
        assert sm.check_status_update(
            OrderStatus.ACCEPTED, OrderStatus.DELIVERED, OWNER, PARTIES
        ) == sm.Relation.RESTAURANT
        assert sm.check_status_update(
            OrderStatus.DELIVERED, OrderStatus.PREPARING, RIDER, WITH_RIDER
        ) == sm.Relation.RIDER

    def test_strict_mode_follows_successor_graph(self):
        sm.check_status_update(OrderStatus.READY, OrderStatus.PICKED, RIDER, WITH_RIDER, strict=True)
        with pytest.raises(InvalidTransitionError):
            sm.check_status_update(
                OrderStatus.ACCEPTED, OrderStatus.DELIVERED, OWNER, PARTIES, strict=True
            )
        with pytest.raises(InvalidTransitionError):
            sm.check_status_update(
                OrderStatus.CANCELLED, OrderStatus.CANCELLED, CUSTOMER, PARTIES, strict=True
            )

    def test_strict_mode_checks_authorization_first(self):
        with pytest.raises(ForbiddenError):
            sm.check_status_update(
                OrderStatus.DELIVERED, OrderStatus.PREPARING, OTHER_OWNER, PARTIES, strict=True
            )


class TestClaimable:

    @pytest.mark.parametrize("status", sorted(sm.CLAIMABLE_STATUSES))
    def test_unassigned_claimable_statuses(self, status):
        sm.check_claimable(status, None)

    @pytest.mark.parametrize(
        "status", [OrderStatus.PLACED, OrderStatus.PICKED, OrderStatus.DELIVERED, OrderStatus.CANCELLED]
    )
    def test_other_statuses_are_not_claimable(self, status):
        with pytest.raises(InvalidTransitionError):
            sm.check_claimable(status, None)

    def test_assigned_order_reports_already_assigned(self):
        with pytest.raises(AlreadyAssignedError):
            sm.check_claimable(OrderStatus.READY, "rider-1")


def _recipients(effects):
    return [(n.user_id, n.role) for n in effects.notices]


def _routes(effects):
    return [(b.channel, b.event) for b in effects.broadcasts]


class TestEffects:

    def test_creation(self):
        effects = sm.effects_for_creation("ABCD1234", PARTIES)
        assert _recipients(effects) == [("cust-1", Role.CUSTOMER), ("owner-1", Role.RESTAURANT)]
        assert effects.notices[0].message == "Order #ABCD1234 has been placed"
        assert effects.notices[1].message == "New order #ABCD1234 received"
        assert _routes(effects) == [
            (user_channel("cust-1"), sm.ORDER_STATUS_UPDATE),
            (restaurant_channel("rest-1"), sm.NEW_ORDER),
        ]

    def test_accept_tells_customer_and_offers_order_to_riders(self):
        effects = sm.effects_for_accept("ABCD1234", PARTIES)
        assert _recipients(effects) == [("cust-1", Role.CUSTOMER)]
        assert effects.notices[0].message == "Order #ABCD1234 has been accepted"
        assert (RIDERS_ONLINE, sm.ORDER_AVAILABLE) in _routes(effects)
        assert (restaurant_channel("rest-1"), sm.ORDER_STATUS_UPDATE) in _routes(effects)

    def test_claim_notifies_customer_and_restaurant(self):
        effects = sm.effects_for_claim("ABCD1234", WITH_RIDER)
        assert _recipients(effects) == [("cust-1", Role.CUSTOMER), ("owner-1", Role.RESTAURANT)]
        assert effects.notices[0].message == "Order #ABCD1234 has been picked up by a rider"
        assert effects.notices[1].message == "Order #ABCD1234 has been assigned to a rider"
        assert (RIDERS_ONLINE, sm.ORDER_ASSIGNED) in _routes(effects)

    def test_restaurant_update_does_not_notify_itself(self):
        effects = sm.effects_for_status_update(
            "ABCD1234", OrderStatus.ACCEPTED, OrderStatus.PREPARING, PARTIES, sm.Relation.RESTAURANT
        )
        assert _recipients(effects) == [("cust-1", Role.CUSTOMER)]
        assert effects.notices[0].message == "Order #ABCD1234 is being prepared"

    def test_rider_update_notifies_every_party(self):
        effects = sm.effects_for_status_update(
            "ABCD1234", OrderStatus.READY, OrderStatus.PICKED, WITH_RIDER, sm.Relation.RIDER
        )
        assert sorted(_recipients(effects)) == sorted([
            ("cust-1", Role.CUSTOMER),
            ("owner-1", Role.RESTAURANT),
            ("rider-1", Role.RIDER),
        ])
        assert (user_channel("rider-1"), sm.ORDER_STATUS_UPDATE) in _routes(effects)

    def test_cancelling_unassigned_claimable_order_withdraws_it(self):
        effects = sm.effects_for_status_update(
            "ABCD1234", OrderStatus.READY, OrderStatus.CANCELLED, PARTIES, sm.Relation.CUSTOMER
        )
        assert (RIDERS_ONLINE, sm.ORDER_WITHDRAWN) in _routes(effects)

    def test_cancelling_placed_order_does_not_reach_riders(self):
        effects = sm.effects_for_status_update(
            "ABCD1234", OrderStatus.PLACED, OrderStatus.CANCELLED, PARTIES, sm.Relation.CUSTOMER
        )
        assert all(channel != RIDERS_ONLINE for channel, _ in _routes(effects))
