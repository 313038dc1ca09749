from datetime import datetime


def _stamp():
    return datetime.now().strftime('%H:%M:%S')


def log_api_call(operation, target, outcome='ok'):
    """Log one call out to Google. outcome is 'ok' or a short failure note"""
    icon = "🌐" if outcome == 'ok' else "❌"
    print(f"[SHEETS] {_stamp()} {icon} {operation.upper()} '{target}' | {outcome}")


def log_rate_limit_error(target):
    """Log a rate limit error"""
    print(f"[SHEETS] {_stamp()} ⛔ RATE LIMIT for '{target}'")


def log_operation(operation, **details):
    """Log a completed rollcall operation with its key arguments"""
    detail_str = ", ".join(f"{key}={value!r}" for key, value in details.items())
    print(f"[ROLLCALL] {_stamp()} ✅ {operation}({detail_str})")


def log_operation_error(operation, error):
    """Log a failed rollcall operation"""
    print(f"[ROLLCALL] {_stamp()} ❌ {operation} failed: {error}")
