from tubebatch.config import T, E

_QUOTA_USAGE = 0
_CALL_COUNTS = {}

DAILY_QUOTA_LIMIT = 10000

# Based on https://developers.google.com/youtube/v3/determine_quota_cost
QUOTA_COSTS = {
    'videos.insert': 1600,
    'videos.list': 1,
    'videos.update': 50,
}

# Substrings the API uses when the daily allotment is spent
QUOTA_EXHAUSTION_MARKERS = (
    'exceeded the number of videos',
    'quotaexceeded',
    'uploadlimitexceeded',
    'exceeded your quota',
)

class QuotaExhaustedError(Exception):
    """Raised when the API reports that the day's quota is spent."""

def is_quota_exhausted(error):
    """Returns True when an exception signals quota exhaustion."""
    if isinstance(error, QuotaExhaustedError):
        return True
    message = str(error).lower()
    return any(marker in message for marker in QUOTA_EXHAUSTION_MARKERS)

def increment_quota(api_call_name, translator):
    """Increments the global quota usage counter and prints the cost."""
    global _QUOTA_USAGE
    cost = QUOTA_COSTS.get(api_call_name, 0)
    if cost > 0:
        _QUOTA_USAGE += cost
        _CALL_COUNTS[api_call_name] = _CALL_COUNTS.get(api_call_name, 0) + 1
        print(translator.get('quota.increment', T_INFO=T.INFO, E_KEY=E.KEY, cost=cost, api_call_name=api_call_name, total_usage=_QUOTA_USAGE))

def get_total_quota_usage():
    """Returns the total estimated quota usage for the session."""
    return _QUOTA_USAGE

def get_call_counts():
    """Number of billed calls per API method this session."""
    return dict(_CALL_COUNTS)

def reset_quota_usage():
    """Starts a new quota day: the total and the per-call counts go back to zero."""
    global _QUOTA_USAGE
    _QUOTA_USAGE = 0
    _CALL_COUNTS.clear()

def display_quota_usage(translator):
    """Prints the final estimated quota usage for the session."""
    print(translator.get('quota.report_header', T_HEADER=T.HEADER, E_REPORT=E.REPORT))
    for api_call_name, count in sorted(_CALL_COUNTS.items()):
        print(translator.get('quota.report_call', api_call_name=api_call_name, count=count, cost=count * QUOTA_COSTS[api_call_name]))
    print(translator.get('quota.report_total', total_usage=_QUOTA_USAGE))
    print(translator.get('quota.report_remaining', remaining=max(DAILY_QUOTA_LIMIT - _QUOTA_USAGE, 0)))
    print(translator.get('quota.report_limit_info', limit=DAILY_QUOTA_LIMIT))
    if _QUOTA_USAGE > DAILY_QUOTA_LIMIT * 0.9:
        print(translator.get('quota.report_warning', T_WARN=T.WARN, E_WARN=E.WARN))
    print(translator.get('quota.report_footer', T_HEADER=T.HEADER))
