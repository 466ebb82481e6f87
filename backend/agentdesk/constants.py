"""Constants shared by the confirmation flow and the transcription stub."""

# ---------------------------------------------------------------------------
# Agent actions
# ---------------------------------------------------------------------------
CREATE_TASK_ACTION = "create_task"
TASK_CREATED_LABEL = "task_created"
TASK_CREATED_MESSAGE = "Task created successfully"
DEFAULT_ACTION_MESSAGE = "Action {} executed successfully"
REJECTION_REASON = "User rejected proposal"

# SQLite INTEGER is a signed 64-bit value
SQLITE_MIN_INT = -(2**63)
SQLITE_MAX_INT = 2**63 - 1

# ---------------------------------------------------------------------------
# Transcription limits
# ---------------------------------------------------------------------------
MIN_AUDIO_BYTES = 10
MAX_AUDIO_BYTES = 50 * 1024 * 1024  # 50 MB
PARTIAL_TRANSCRIPT_MAX_KB = 1
EXTENDED_TRANSCRIPT_MAX_KB = 10

# ---------------------------------------------------------------------------
# Simulated processing delay
# ---------------------------------------------------------------------------
TRANSCRIBE_BASE_DELAY_MS = 100
TRANSCRIBE_BYTES_PER_MS = 10_000
TRANSCRIBE_MAX_DELAY_MS = 2000
