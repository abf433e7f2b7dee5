from prometheus_client import Counter, Gauge

# Business Metrics
food_orders_created_total = Counter(
    "food_orders_created_total",
    "Total orders placed by customers"
)

food_order_transitions_total = Counter(
    "food_order_transitions_total",
    "Total successful order status transitions",
    ["status"] # Labels: 'ACCEPTED', 'PREPARING', 'DELIVERED', ...
)

food_rider_claims_total = Counter(
    "food_rider_claims_total",
    "Rider claim attempts on orders",
    ["outcome"] # Labels: 'won', 'lost'
)

food_realtime_connections = Gauge(
    "food_realtime_connections",
    "Number of currently open realtime websocket connections"
)

food_realtime_publish_failures_total = Counter(
    "food_realtime_publish_failures_total",
    "Realtime event deliveries that failed and were dropped",
    ["event"]
)
