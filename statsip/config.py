import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    # Sampling
    SIP_ENCODING = os.getenv("SIP_ENCODING", "utf-8")
    SIP_DECODE_ERRORS = os.getenv("SIP_DECODE_ERRORS", "replace") # strict, replace, ignore...
    SIP_DEFAULT_LIMIT = int(os.getenv("SIP_DEFAULT_LIMIT", "4096"))
    TRACK_SIPS = os.getenv("TRACK_SIPS", "false").lower() == "true"

    # Observability
    LANGFUSE_PUBLIC_KEY = os.getenv("LANGFUSE_PUBLIC_KEY")
    LANGFUSE_SECRET_KEY = os.getenv("LANGFUSE_SECRET_KEY")
    LANGFUSE_HOST = os.getenv("LANGFUSE_HOST", "https://cloud.langfuse.com")
