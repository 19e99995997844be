import os
import tempfile

# Point the app at a throwaway database before reeltrack is imported
_TMP_DIR = tempfile.mkdtemp(prefix="reeltrack-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR}/test.db"
os.environ["DATA_DIR"] = _TMP_DIR
os.environ["LOGS_DIR"] = os.path.join(_TMP_DIR, "logs")
os.environ["SECRET_KEY"] = "test-secret-key"
