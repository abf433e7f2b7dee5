from .setup import setup_observability
from .metrics import (
    food_orders_created_total,
    food_order_transitions_total,
    food_rider_claims_total,
    food_realtime_connections,
    food_realtime_publish_failures_total
)
