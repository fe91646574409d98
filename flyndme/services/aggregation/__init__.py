from .retry import fetch_with_retry, call_with_retry, backoff_delay
from .helpers import (
    parse_date,
    parse_destination_records,
    parse_offer_records,
    cheapest_per_destination,
    group_by_destination,
    filter_full_coverage,
    drop_mixed_currency,
    build_aggregate,
    rank_destinations
)

__all__ = [
    'fetch_with_retry',
    'call_with_retry',
    'backoff_delay',
    'parse_date',
    'parse_destination_records',
    'parse_offer_records',
    'cheapest_per_destination',
    'group_by_destination',
    'filter_full_coverage',
    'drop_mixed_currency',
    'build_aggregate',
    'rank_destinations'
]
