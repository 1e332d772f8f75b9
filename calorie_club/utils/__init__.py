from .utils import require_finite, round_half_up, parse_number, parse_optional_number, parse_text, parse_id
from .date_utils import (
    bucket,
    start_of_day,
    end_of_day,
    start_of_week,
    end_of_week,
    days_between,
    group_by_day,
    friendly_date_label,
    day_label,
    parse_timestamp,
)
