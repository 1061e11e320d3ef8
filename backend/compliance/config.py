import os

from dotenv import load_dotenv

load_dotenv()

COMPLIANCE_JURISDICTION = os.getenv("COMPLIANCE_JURISDICTION", "DEFAULT")
COMPLIANCE_TIMEZONE = os.getenv("COMPLIANCE_TIMEZONE", "America/New_York")
AUDIT_WRITE_ATTEMPTS = int(os.getenv("AUDIT_WRITE_ATTEMPTS", "3"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
