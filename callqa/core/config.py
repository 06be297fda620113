import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_LOCALE = os.getenv("CALLQA_LOCALE", "en")           # en|hi
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_EVENTS = os.getenv("LOG_EVENTS", "0") == "1"            # route scoring events to logging
