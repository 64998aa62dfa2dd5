import os
from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

# Outer size guard for untrusted text input (armor blocks, public key lines).
# The wire buffer trusts declared chunk lengths, so callers facing the network
# should keep this bounded. 0 disables the check.
MAX_INPUT_BYTES = int(os.getenv("SSHCREDS_MAX_INPUT_BYTES", "1048576"))

# OpenSSH wraps armored base64 at 70 columns
ARMOR_LINE_WIDTH = int(os.getenv("SSHCREDS_ARMOR_LINE_WIDTH", "70"))

FINGERPRINT_HASH = os.getenv("SSHCREDS_FINGERPRINT_HASH", "SHA256").upper()  # SHA256|MD5
LOG_LEVEL = os.getenv("SSHCREDS_LOG_LEVEL", "INFO").upper()


class Settings(BaseModel):
    max_input_bytes: int = MAX_INPUT_BYTES
    armor_line_width: int = ARMOR_LINE_WIDTH
    fingerprint_hash: str = FINGERPRINT_HASH
    log_level: str = LOG_LEVEL


SETTINGS = Settings()


def load_settings() -> Settings:
    return SETTINGS
