import os


def _optional_float(value):
    if value is None or value.strip() == '':
        return None
    return float(value)


class Config:
    # Firestore project (falls back to the client's environment default when unset)
    PROJECT_ID = os.environ.get('PROJECT_ID') or None

    # Parent document path for every collection, e.g. "workspaces/demo"
    DB_ROOT_PATH = os.environ.get('DB_ROOT_PATH', '')

    # Per-request deadline in seconds, None leaves it to the client
    REQUEST_TIMEOUT = _optional_float(os.environ.get('REQUEST_TIMEOUT'))

    USER_AGENT = os.environ.get('USER_AGENT', 'firerepo')

    # Firestore rejects write batches larger than this
    MAX_BATCH_SIZE = 500
