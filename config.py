import os
from dotenv import load_dotenv
import logging

from models.draft import DraftConfig

# Load environment variables
load_dotenv()

# Get token from environment variable
TOKEN = os.getenv('TELEGRAM_BOT_TOKEN')
if not TOKEN:
    raise ValueError("TELEGRAM_BOT_TOKEN not found in environment variables!")

DRAFT_CONFIG = DraftConfig(
    tick_interval_ms=float(os.getenv('DRAFT_TICK_INTERVAL_MS', '50'))
)

logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=logging.INFO
)
# httpx logs every Telegram request, which floods the log while the wheel spins
logging.getLogger('httpx').setLevel(logging.WARNING)
