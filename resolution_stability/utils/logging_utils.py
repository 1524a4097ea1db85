import datetime

_verbose = True


def set_verbose(verbose):
    global _verbose
    _verbose = bool(verbose)


def _timestamp():
    return datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def section(title):
    if _verbose:
        print(f"[{_timestamp()}] {title}")


def info(message):
    if _verbose:
        print(f"    ... {message}")


def warn(message):
    # warnings are printed even when quiet
    print(f"   WARNING: {message}")
